"""The seeded question catalog must outlast the repeat window."""
from datetime import datetime, timedelta

import pytest

from app.domain.common.types import utcnow
from app.domain.daily_question.models import Question
from app.domain.pairing.models import Couple, RelationshipType, User
from app.infra.db.repositories.couple_repo import CoupleRepositoryImpl
from app.infra.db.repositories.question_repo import RELATIONSHIP_TAGS, QuestionRepositoryImpl
from app.infra.db.repositories.user_repo import UserRepositoryImpl
from app.settings import Settings
from scripts.seed_questions import QUESTIONS, _question_id

REPEAT_WINDOW_DAYS = Settings.model_fields["question_repeat_window_days"].default


def eligible_for(relationship_type: str) -> list:
    return [
        text
        for text, tags in QUESTIONS
        if relationship_type in tags or not set(tags) & set(RELATIONSHIP_TAGS)
    ]


class TestSeedCatalog:
    def test_texts_are_unique(self):
        texts = [text for text, _ in QUESTIONS]
        assert len(texts) == len(set(texts))

    @pytest.mark.parametrize("relationship_type", [t.value for t in RelationshipType])
    def test_covers_repeat_window(self, relationship_type):
        # A question shown exactly window days ago is still excluded.
        assert len(eligible_for(relationship_type)) > REPEAT_WINDOW_DAYS

    @pytest.mark.parametrize("relationship_type", [t.value for t in RelationshipType])
    async def test_daily_selection_never_runs_dry(self, db_session, relationship_type):
        await UserRepositoryImpl(db_session).create(User(id="alice", email="alice@example.com"))
        await CoupleRepositoryImpl(db_session).create(
            Couple(id="c1", member_a="alice", invite_code="SEED01", created_at=datetime(2025, 1, 1))
        )
        catalog = QuestionRepositoryImpl(db_session)
        for index, (text, tags) in enumerate(QUESTIONS, start=1):
            await catalog.add(Question(id=_question_id(index), text=text, tags=tags))

        start = utcnow()
        shown = []
        for day in range(REPEAT_WINDOW_DAYS + 1):
            now = start + timedelta(days=day)
            picked = await catalog.select_question_for_couple(
                "c1", relationship_type, now - timedelta(days=REPEAT_WINDOW_DAYS)
            )
            assert picked is not None, f"day {day + 1}: catalog exhausted"
            await catalog.record_history("c1", picked, now)
            shown.append(picked)

        assert len(set(shown)) == len(shown)
