"""Daily question domain services.

Cross-device races are settled by storage primitives plus a re-read:

* prompt allocation: unique (couple_id, date_key) insert, losers re-read;
* unlock: whoever re-reads two distinct authors after writing performs a
  conditional ``unlocked_at IS NULL`` update, so exactly one caller wins.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from app.domain.activity.models import ActivityKind
from app.domain.common import messages
from app.domain.common.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)
from app.domain.common.types import parse_date_key, utcnow
from app.domain.daily_question.models import (
    Answer,
    DailyPrompt,
    DailyQuestionView,
    QuestionStatus,
    RevealedAnswers,
)
from app.domain.daily_question.repositories import (
    ActivityRecorder,
    AnswerRepository,
    DailyPromptRepository,
    DuplicateAnswer,
    QuestionRepository,
)
from app.domain.pairing.models import Couple

logger = logging.getLogger(__name__)


def split_answers(
    answers: List[Answer], actor_id: str, couple: Couple
) -> Tuple[Optional[Answer], Optional[Answer]]:
    """Return (mine, partner's) among answers written by members of the couple."""
    mine = next((a for a in answers if a.user_id == actor_id), None)
    partner = next(
        (a for a in answers if a.user_id != actor_id and couple.includes(a.user_id)),
        None,
    )
    return mine, partner


def derive_status(
    prompt: DailyPrompt,
    my_answer: Optional[Answer],
    partner_answer: Optional[Answer],
    day_closed: bool = False,
) -> QuestionStatus:
    """Display status for one member.

    An unlocked prompt without both answers degrades to not unlocked.
    ``day_closed`` lets callers derive ``missed`` for past days.
    """
    if prompt.unlocked_at is not None and my_answer and partner_answer:
        return QuestionStatus.UNLOCKED
    if day_closed:
        return QuestionStatus.MISSED
    if my_answer:
        return QuestionStatus.WAITING
    return QuestionStatus.NOT_ANSWERED


class DailyQuestionService:
    """Allocates each couple's daily prompt and runs the answer exchange."""

    def __init__(
        self,
        question_repo: QuestionRepository,
        prompt_repo: DailyPromptRepository,
        answer_repo: AnswerRepository,
        activity: Optional[ActivityRecorder] = None,
        repeat_window_days: int = 60,
        default_relationship_type: str = "dating",
    ):
        self.question_repo = question_repo
        self.prompt_repo = prompt_repo
        self.answer_repo = answer_repo
        self.activity = activity
        self.repeat_window_days = repeat_window_days
        self.default_relationship_type = default_relationship_type

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------

    async def get_or_create_daily_prompt(self, couple: Couple, date_key: str) -> DailyPrompt:
        """Ensure exactly one prompt exists for (couple, day) and return it."""
        self._check_date_key(date_key)
        try:
            prompt = await self.prompt_repo.get(couple.id, date_key)
            if prompt is not None:
                return prompt

            relationship_type = (
                couple.relationship_type.value
                if couple.relationship_type
                else self.default_relationship_type
            )
            now = utcnow()
            question_id = await self.question_repo.select_question_for_couple(
                couple.id,
                relationship_type,
                now - timedelta(days=self.repeat_window_days),
            )
            if question_id is None:
                logger.warning(
                    "No unshown question for couple %s (type=%s)", couple.id, relationship_type
                )
                raise UnavailableError(messages.NO_QUESTIONS_AVAILABLE)

            prompt = await self.prompt_repo.create_if_absent(
                DailyPrompt(
                    couple_id=couple.id,
                    date_key=date_key,
                    question_id=question_id,
                    created_at=now,
                )
            )
            if prompt.question_id != question_id:
                logger.info(
                    "Prompt for couple %s on %s already allocated by partner", couple.id, date_key
                )
        except SQLAlchemyError as e:
            logger.warning("Prompt allocation failed for %s/%s: %s", couple.id, date_key, e, exc_info=True)
            raise UnavailableError(messages.FAILED_GET_QUESTION) from e

        await self._record_history(couple.id, prompt.question_id)
        logger.info("Couple %s has question %s for %s", couple.id, prompt.question_id, date_key)
        return prompt

    async def _record_history(self, couple_id: str, question_id: str) -> None:
        # History only affects variety; a failed write must not fail the read.
        try:
            await self.question_repo.record_history(couple_id, question_id, utcnow())
        except SQLAlchemyError as e:
            logger.warning("Recording question history failed for %s: %s", couple_id, e)

    # ------------------------------------------------------------------
    # Exchange
    # ------------------------------------------------------------------

    async def get_daily_question(self, actor_id: str, couple: Couple, date_key: str) -> DailyQuestionView:
        """Read (allocating if needed) the day's prompt and derive the actor's status."""
        self._check_member(actor_id, couple)
        prompt = await self.get_or_create_daily_prompt(couple, date_key)
        try:
            answers = await self.answer_repo.list_for_day(couple.id, date_key)
            mine, partner = split_answers(answers, actor_id, couple)
            if mine and partner and prompt.unlocked_at is None:
                # Both answers landed but no submitter's re-read flipped it yet.
                unlocked_at = await self._unlock_if_complete(couple, date_key, answers)
                if unlocked_at is None:
                    prompt = await self.prompt_repo.get(couple.id, date_key) or prompt
                else:
                    prompt = prompt.model_copy(update={"unlocked_at": unlocked_at})
        except SQLAlchemyError as e:
            logger.warning("Reading answers failed for %s/%s: %s", couple.id, date_key, e, exc_info=True)
            raise UnavailableError(messages.FAILED_GET_QUESTION) from e

        status = derive_status(prompt, mine, partner)
        is_unlocked = status == QuestionStatus.UNLOCKED
        if prompt.unlocked_at is not None and not is_unlocked:
            logger.error(
                "Prompt %s/%s is unlocked with fewer than two answers", couple.id, date_key
            )
        return DailyQuestionView(
            prompt=prompt,
            status=status,
            my_status="answered" if mine else "not_answered",
            is_unlocked=is_unlocked,
            my_answer=mine,
            partner_answer=partner if is_unlocked else None,
        )

    async def submit_answer(self, actor_id: str, couple: Couple, date_key: str, text: str) -> Answer:
        """Store the actor's one answer for the day and unlock if it completes the pair."""
        self._check_member(actor_id, couple)
        body = (text or "").strip()
        if not body:
            raise ValidationError(messages.EMPTY_ANSWER)

        await self.get_or_create_daily_prompt(couple, date_key)
        try:
            if await self.answer_repo.get(couple.id, date_key, actor_id):
                raise ConflictError(messages.ALREADY_ANSWERED)
            answer = await self.answer_repo.create(
                Answer(
                    couple_id=couple.id,
                    date_key=date_key,
                    user_id=actor_id,
                    text=body,
                    created_at=utcnow(),
                )
            )
        except DuplicateAnswer:
            # Lost the race between the check and the insert.
            raise ConflictError(messages.ALREADY_ANSWERED)
        except SQLAlchemyError as e:
            logger.warning("Answer insert failed for %s/%s: %s", couple.id, date_key, e, exc_info=True)
            raise UnavailableError(messages.FAILED_SUBMIT_ANSWER) from e
        logger.info("User %s answered for couple %s on %s", actor_id, couple.id, date_key)

        # The answer is stored; everything below is recoverable on the next read.
        try:
            answers = await self.answer_repo.list_for_day(couple.id, date_key)
            await self._unlock_if_complete(couple, date_key, answers)
        except SQLAlchemyError as e:
            logger.warning("Unlock check after submit failed for %s/%s: %s", couple.id, date_key, e)
        await self._record_activity(actor_id, date_key, ActivityKind.QUESTION_SUBMIT)
        return answer

    async def get_revealed_answers(self, actor_id: str, couple: Couple, date_key: str) -> RevealedAnswers:
        """Both answers for the day, only once unlocked."""
        self._check_member(actor_id, couple)
        self._check_date_key(date_key)
        try:
            prompt = await self.prompt_repo.get(couple.id, date_key)
            if prompt is None or prompt.unlocked_at is None:
                raise ValidationError(messages.NOT_UNLOCKED_YET)
            answers = await self.answer_repo.list_for_day(couple.id, date_key)
        except SQLAlchemyError as e:
            logger.warning("Revealed answers read failed for %s/%s: %s", couple.id, date_key, e)
            raise UnavailableError(messages.FAILED_GET_ANSWERS) from e

        mine, partner = split_answers(answers, actor_id, couple)
        if mine is None or partner is None:
            logger.error(
                "Prompt %s/%s unlocked but current members lack answers (%d rows)",
                couple.id, date_key, len(answers),
            )
            raise NotFoundError(messages.ANSWERS_NOT_AVAILABLE)
        return RevealedAnswers(my_answer=mine, partner_answer=partner)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _unlock_if_complete(
        self, couple: Couple, date_key: str, answers: List[Answer]
    ) -> Optional[datetime]:
        """Flip unlocked_at when two distinct members have answered.

        Returns the timestamp if this call performed the transition, else None.
        """
        authors = {a.user_id for a in answers if couple.includes(a.user_id)}
        if len(authors) != 2:
            return None
        unlocked_at = utcnow()
        if not await self.prompt_repo.mark_unlocked(couple.id, date_key, unlocked_at):
            return None
        logger.info("Couple %s unlocked %s", couple.id, date_key)
        for member in couple.members:
            await self._record_activity(member, date_key, ActivityKind.QUESTION_UNLOCK)
        return unlocked_at

    async def _record_activity(self, user_id: str, date_key: str, kind: ActivityKind) -> None:
        if self.activity is None:
            return
        try:
            await self.activity.record(user_id, date_key, kind.value)
        except SQLAlchemyError as e:
            logger.warning("Activity %s not recorded for %s: %s", kind.value, user_id, e)

    @staticmethod
    def _check_member(actor_id: str, couple: Couple) -> None:
        if not actor_id:
            raise AuthorizationError(messages.NOT_AUTHENTICATED)
        if not couple.includes(actor_id):
            raise AuthorizationError(messages.NOT_IN_COUPLE)
        if not couple.is_complete:
            raise ValidationError(messages.COUPLE_NOT_COMPLETE)

    @staticmethod
    def _check_date_key(date_key: str) -> None:
        try:
            parse_date_key(date_key)
        except ValueError:
            raise ValidationError(messages.INVALID_DATE_KEY)
