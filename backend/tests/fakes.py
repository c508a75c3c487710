"""In-memory repositories for service tests.

Each fake yields to the event loop before it reads, so ``asyncio.gather``
interleaves callers the way concurrent requests would. Statements that are
atomic in the database (conditional updates, unique inserts) are atomic here
because they contain no await.
"""
import asyncio
import random
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from app.domain.activity.models import ACTIVITY_FLAGS, ActivityKind, DailyActivity
from app.domain.common import messages
from app.domain.daily_question.models import Answer, DailyPrompt, Question
from app.domain.daily_question.repositories import DuplicateAnswer
from app.domain.pairing.models import Couple, RelationshipType
from app.domain.pairing.repositories import (
    InviteCodeCollision,
    JoinRejected,
    MembershipConflict,
)

RELATIONSHIP_TAGS = {t.value for t in RelationshipType}


class FakeCoupleRepository:
    def __init__(self):
        self.couples: Dict[str, Couple] = {}

    def _find_member(self, user_id: str) -> Optional[Couple]:
        return next((c for c in self.couples.values() if c.includes(user_id)), None)

    async def create(self, couple: Couple) -> Couple:
        await asyncio.sleep(0)
        if any(c.invite_code == couple.invite_code for c in self.couples.values()):
            raise InviteCodeCollision(couple.invite_code)
        if self._find_member(couple.member_a):
            raise MembershipConflict(couple.member_a)
        self.couples[couple.id] = couple
        return couple

    async def get_by_id(self, couple_id: str) -> Optional[Couple]:
        await asyncio.sleep(0)
        return self.couples.get(couple_id)

    async def get_by_member(self, user_id: str) -> Optional[Couple]:
        await asyncio.sleep(0)
        return self._find_member(user_id)

    async def redeem_invite_code(self, user_id: str, invite_code: str) -> Couple:
        await asyncio.sleep(0)
        couple = next((c for c in self.couples.values() if c.invite_code == invite_code), None)
        if couple is None or couple.member_b is not None:
            raise JoinRejected(messages.INVALID_INVITE_CODE)
        if couple.member_a == user_id:
            raise JoinRejected(messages.CANNOT_JOIN_OWN_COUPLE)
        if self._find_member(user_id):
            raise JoinRejected(messages.ALREADY_IN_COUPLE)
        joined = couple.model_copy(update={"member_b": user_id})
        self.couples[couple.id] = joined
        return joined

    async def delete(self, couple_id: str) -> None:
        self.couples.pop(couple_id, None)

    async def clear_member_b(self, couple_id: str, user_id: str) -> None:
        couple = self.couples.get(couple_id)
        if couple and couple.member_b == user_id:
            self.couples[couple_id] = couple.model_copy(update={"member_b": None})

    async def set_invite_code(self, couple_id: str, invite_code: str) -> Optional[Couple]:
        await asyncio.sleep(0)
        if any(c.invite_code == invite_code for c in self.couples.values()):
            raise InviteCodeCollision(invite_code)
        couple = self.couples.get(couple_id)
        if couple is None or couple.member_b is not None:
            return None
        updated = couple.model_copy(update={"invite_code": invite_code})
        self.couples[couple_id] = updated
        return updated

    async def update_profile(
        self,
        couple_id: str,
        relationship_type: Optional[RelationshipType],
        relationship_start_date: Optional[date],
    ) -> Couple:
        updated = self.couples[couple_id].model_copy(
            update={
                "relationship_type": relationship_type,
                "relationship_start_date": relationship_start_date,
            }
        )
        self.couples[couple_id] = updated
        return updated


class FakeQuestionRepository:
    def __init__(self, questions: List[Question]):
        self.questions = {q.id: q for q in questions}
        self.history: Dict[Tuple[str, str], datetime] = {}
        self.selections = 0

    async def select_question_for_couple(
        self, couple_id: str, relationship_type: str, shown_since: datetime
    ) -> Optional[str]:
        await asyncio.sleep(0)
        self.selections += 1
        candidates = []
        for q in self.questions.values():
            shown_at = self.history.get((couple_id, q.id))
            if shown_at is not None and shown_at >= shown_since:
                continue
            type_tags = RELATIONSHIP_TAGS.intersection(q.tags)
            if type_tags and relationship_type not in type_tags:
                continue
            candidates.append(q.id)
        return random.choice(candidates) if candidates else None

    async def record_history(self, couple_id: str, question_id: str, shown_at: datetime) -> None:
        self.history[(couple_id, question_id)] = shown_at


class FakeDailyPromptRepository:
    def __init__(self, questions: Optional[FakeQuestionRepository] = None):
        self.prompts: Dict[Tuple[str, str], DailyPrompt] = {}
        self.questions = questions
        self.inserts = 0
        self.unlock_writes = 0

    def _with_question(self, prompt: DailyPrompt) -> DailyPrompt:
        if self.questions is None:
            return prompt
        return prompt.model_copy(update={"question": self.questions.questions.get(prompt.question_id)})

    async def get(self, couple_id: str, date_key: str) -> Optional[DailyPrompt]:
        await asyncio.sleep(0)
        prompt = self.prompts.get((couple_id, date_key))
        return self._with_question(prompt) if prompt else None

    async def create_if_absent(self, prompt: DailyPrompt) -> DailyPrompt:
        await asyncio.sleep(0)
        key = (prompt.couple_id, prompt.date_key)
        if key not in self.prompts:
            self.prompts[key] = prompt
            self.inserts += 1
        return self._with_question(self.prompts[key])

    async def mark_unlocked(self, couple_id: str, date_key: str, unlocked_at: datetime) -> bool:
        await asyncio.sleep(0)
        prompt = self.prompts.get((couple_id, date_key))
        if prompt is None or prompt.unlocked_at is not None:
            return False
        self.prompts[(couple_id, date_key)] = prompt.model_copy(update={"unlocked_at": unlocked_at})
        self.unlock_writes += 1
        return True


class FakeAnswerRepository:
    def __init__(self):
        self.answers: Dict[Tuple[str, str, str], Answer] = {}

    async def get(self, couple_id: str, date_key: str, user_id: str) -> Optional[Answer]:
        await asyncio.sleep(0)
        return self.answers.get((couple_id, date_key, user_id))

    async def create(self, answer: Answer) -> Answer:
        await asyncio.sleep(0)
        key = (answer.couple_id, answer.date_key, answer.user_id)
        if key in self.answers:
            raise DuplicateAnswer(answer.user_id)
        self.answers[key] = answer
        return answer

    async def list_for_day(self, couple_id: str, date_key: str) -> List[Answer]:
        await asyncio.sleep(0)
        return [
            a for (c, d, _), a in self.answers.items() if c == couple_id and d == date_key
        ]


class FakeActivityRepository:
    def __init__(self):
        self.rows: Dict[Tuple[str, str], DailyActivity] = {}

    async def mark(self, user_id: str, date_key: str, kind: ActivityKind) -> DailyActivity:
        row = self.rows.get((user_id, date_key)) or DailyActivity(user_id=user_id, date_key=date_key)
        row = row.model_copy(update={ACTIVITY_FLAGS[kind]: True})
        self.rows[(user_id, date_key)] = row
        return row

    async def get(self, user_id: str, date_key: str) -> Optional[DailyActivity]:
        return self.rows.get((user_id, date_key))

    async def list_for_user(self, user_id: str) -> List[DailyActivity]:
        return sorted(
            (r for (u, _), r in self.rows.items() if u == user_id),
            key=lambda r: r.date_key,
        )
