"""Closed error vocabulary, one block per operation.

The API layer never forwards raw backend detail; callers can localize these.
"""

NOT_AUTHENTICATED = "Not authenticated"
NOT_IN_COUPLE = "Not in a couple"

# createCouple
ALREADY_IN_COUPLE = "Already in a couple"
FAILED_CREATE_COUPLE = "Failed to create couple"

# joinCouple (closed set returned by the redemption procedure)
INVALID_INVITE_CODE = "Invalid or already used code"
CANNOT_JOIN_OWN_COUPLE = "Cannot join own couple"
FAILED_JOIN_COUPLE = "Failed to join couple"
JOIN_REJECTIONS = frozenset({
    NOT_AUTHENTICATED,
    ALREADY_IN_COUPLE,
    INVALID_INVITE_CODE,
    CANNOT_JOIN_OWN_COUPLE,
})

# unpairCouple
FAILED_UNPAIR = "Failed to unpair"

# getCurrentCouple
FAILED_GET_COUPLE = "Failed to get couple"

# regenerateInviteCode
COUPLE_ALREADY_COMPLETE = "Couple is already complete"
FAILED_REGENERATE_CODE = "Failed to regenerate code"

# updateRelationshipProfile
INVALID_RELATIONSHIP_TYPE = "Invalid relationship type"
FAILED_UPDATE_PROFILE = "Failed to update relationship profile"

# getDailyQuestion / getOrCreateDailyPrompt
COUPLE_NOT_COMPLETE = "Couple not complete"
NO_QUESTIONS_AVAILABLE = "No questions available"
FAILED_GET_QUESTION = "Failed to get daily question"

# submitAnswer
ALREADY_ANSWERED = "Already answered today"
EMPTY_ANSWER = "Answer cannot be empty"
FAILED_SUBMIT_ANSWER = "Failed to submit answer"

# getRevealedAnswers
NOT_UNLOCKED_YET = "Not unlocked yet"
ANSWERS_NOT_AVAILABLE = "Answers not available"
FAILED_GET_ANSWERS = "Failed to get answers"

# activity
FAILED_LOG_ACTIVITY = "Failed to log activity"
FAILED_GET_STREAK = "Failed to get streak"
FAILED_GET_ACTIVITY = "Failed to get activity"
UNKNOWN_ACTIVITY_KIND = "Unknown activity kind"

# anniversary
NO_START_DATE = "Relationship start date not set"

INVALID_DATE_KEY = "Invalid date key"
INVALID_REQUEST = "Invalid request"
