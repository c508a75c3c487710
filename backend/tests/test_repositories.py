"""Repository tests against SQLite."""
from datetime import date, datetime, timedelta

import pytest

from app.domain.activity.models import ActivityKind
from app.domain.common import messages
from app.domain.common.types import generate_id, utcnow
from app.domain.daily_question.models import Answer, DailyPrompt, Question
from app.domain.daily_question.repositories import DuplicateAnswer
from app.domain.pairing.models import Couple, RelationshipType, User
from app.domain.pairing.repositories import (
    InviteCodeCollision,
    JoinRejected,
    MembershipConflict,
)
from app.infra.db.base import resolve_database_url
from app.infra.db.repositories.activity_repo import ActivityRepositoryImpl
from app.infra.db.repositories.answer_repo import AnswerRepositoryImpl
from app.infra.db.repositories.couple_repo import CoupleRepositoryImpl
from app.infra.db.repositories.daily_prompt_repo import DailyPromptRepositoryImpl
from app.infra.db.repositories.question_repo import QuestionRepositoryImpl
from app.infra.db.repositories.user_repo import UserRepositoryImpl

DAY = "2025-03-01"


@pytest.fixture
async def users(db_session):
    repo = UserRepositoryImpl(db_session)
    created = {}
    for name in ("alice", "bob", "carol"):
        created[name] = await repo.create(User(id=name, email=f"{name}@example.com"))
    return created


def new_couple(member_a: str, code: str) -> Couple:
    return Couple(id=generate_id(), member_a=member_a, invite_code=code, created_at=utcnow())


@pytest.fixture
async def paired(db_session, users):
    repo = CoupleRepositoryImpl(db_session)
    await repo.create(new_couple("alice", "PAIR01"))
    return await repo.redeem_invite_code("bob", "PAIR01")


class TestUserRepository:
    async def test_lookup(self, db_session, users):
        repo = UserRepositoryImpl(db_session)
        assert (await repo.get_by_id("alice")).email == "alice@example.com"
        assert await repo.get_by_id("nobody") is None


class TestCoupleRepository:
    async def test_create_and_get_by_member(self, db_session, users):
        repo = CoupleRepositoryImpl(db_session)
        created = await repo.create(new_couple("alice", "ABC123"))
        found = await repo.get_by_member("alice")
        assert found.id == created.id
        assert found.member_b is None
        assert await repo.get_by_member("bob") is None

    async def test_invite_code_collision(self, db_session, users):
        repo = CoupleRepositoryImpl(db_session)
        await repo.create(new_couple("alice", "ABC123"))
        with pytest.raises(InviteCodeCollision):
            await repo.create(new_couple("bob", "ABC123"))
        # session is usable after the rollback
        assert await repo.get_by_member("bob") is None

    async def test_member_a_unique(self, db_session, users):
        repo = CoupleRepositoryImpl(db_session)
        await repo.create(new_couple("alice", "ABC123"))
        with pytest.raises(MembershipConflict):
            await repo.create(new_couple("alice", "XYZ789"))

    async def test_redeem(self, db_session, users):
        repo = CoupleRepositoryImpl(db_session)
        created = await repo.create(new_couple("alice", "ABC123"))
        joined = await repo.redeem_invite_code("bob", "ABC123")
        assert joined.id == created.id
        assert joined.member_b == "bob"
        assert (await repo.get_by_member("bob")).id == created.id

    async def test_redeem_rejections(self, db_session, users):
        repo = CoupleRepositoryImpl(db_session)
        await repo.create(new_couple("alice", "ABC123"))

        with pytest.raises(JoinRejected) as exc:
            await repo.redeem_invite_code("alice", "ABC123")
        assert exc.value.reason == messages.CANNOT_JOIN_OWN_COUPLE

        with pytest.raises(JoinRejected) as exc:
            await repo.redeem_invite_code("bob", "NOPE00")
        assert exc.value.reason == messages.INVALID_INVITE_CODE

        await repo.redeem_invite_code("bob", "ABC123")
        with pytest.raises(JoinRejected) as exc:
            await repo.redeem_invite_code("carol", "ABC123")
        assert exc.value.reason == messages.INVALID_INVITE_CODE

    async def test_redeem_rejects_user_in_other_couple(self, db_session, users):
        repo = CoupleRepositoryImpl(db_session)
        await repo.create(new_couple("alice", "ABC123"))
        await repo.create(new_couple("bob", "BOB456"))
        with pytest.raises(JoinRejected) as exc:
            await repo.redeem_invite_code("bob", "ABC123")
        assert exc.value.reason == messages.ALREADY_IN_COUPLE
        assert (await repo.get_by_member("alice")).member_b is None

    async def test_clear_member_b_and_delete(self, db_session, paired):
        repo = CoupleRepositoryImpl(db_session)
        await repo.clear_member_b(paired.id, "bob")
        assert (await repo.get_by_id(paired.id)).member_b is None
        assert await repo.get_by_member("bob") is None

        await repo.delete(paired.id)
        assert await repo.get_by_id(paired.id) is None

    async def test_delete_removes_daily_rows(self, db_session, paired):
        questions = QuestionRepositoryImpl(db_session)
        await questions.add(Question(id="q1", text="Hi?"))
        prompts = DailyPromptRepositoryImpl(db_session)
        await prompts.create_if_absent(
            DailyPrompt(couple_id=paired.id, date_key=DAY, question_id="q1", created_at=utcnow())
        )
        await CoupleRepositoryImpl(db_session).delete(paired.id)
        assert await prompts.get(paired.id, DAY) is None

    async def test_set_invite_code_only_while_pending(self, db_session, users):
        repo = CoupleRepositoryImpl(db_session)
        created = await repo.create(new_couple("alice", "ABC123"))
        updated = await repo.set_invite_code(created.id, "NEW999")
        assert updated.invite_code == "NEW999"

        await repo.redeem_invite_code("bob", "NEW999")
        assert await repo.set_invite_code(created.id, "LATE00") is None

    async def test_update_profile(self, db_session, paired):
        repo = CoupleRepositoryImpl(db_session)
        updated = await repo.update_profile(paired.id, RelationshipType.MARRIED, date(2020, 6, 15))
        assert updated.relationship_type == RelationshipType.MARRIED
        assert updated.relationship_start_date == date(2020, 6, 15)


class TestQuestionRepository:
    @pytest.fixture
    async def catalog(self, db_session):
        repo = QuestionRepositoryImpl(db_session)
        await repo.add(Question(id="q-any", text="Untagged?"))
        await repo.add(Question(id="q-theme", text="Theme only?", tags=["fun"]))
        await repo.add(Question(id="q-dating", text="Dating?", tags=["dating", "fun"]))
        await repo.add(Question(id="q-married", text="Married?", tags=["married"]))
        return repo

    async def test_filters_by_relationship_type(self, catalog, paired):
        since = utcnow() - timedelta(days=60)
        picks = {await catalog.select_question_for_couple(paired.id, "married", since) for _ in range(40)}
        assert picks <= {"q-any", "q-theme", "q-married"}
        assert "q-married" in picks

    async def test_excludes_recent_history(self, catalog, paired):
        now = utcnow()
        since = now - timedelta(days=60)
        for q in ("q-any", "q-theme"):
            await catalog.record_history(paired.id, q, now)
        for _ in range(10):
            assert await catalog.select_question_for_couple(paired.id, "dating", since) == "q-dating"

        await catalog.record_history(paired.id, "q-dating", now)
        assert await catalog.select_question_for_couple(paired.id, "dating", since) is None

    async def test_old_history_is_eligible(self, catalog, paired):
        now = utcnow()
        old = now - timedelta(days=90)
        for q in ("q-any", "q-theme", "q-dating"):
            await catalog.record_history(paired.id, q, old)
        assert await catalog.select_question_for_couple(
            paired.id, "dating", now - timedelta(days=60)
        ) is not None

    async def test_record_history_refreshes_timestamp(self, catalog, paired):
        now = utcnow()
        since = now - timedelta(days=60)
        await catalog.record_history(paired.id, "q-married", now - timedelta(days=90))
        assert await catalog.select_question_for_couple(paired.id, "married", since) is not None
        for q in ("q-any", "q-theme"):
            await catalog.record_history(paired.id, q, now)
        await catalog.record_history(paired.id, "q-married", now)
        assert await catalog.select_question_for_couple(paired.id, "married", since) is None

    async def test_get_includes_tags(self, catalog):
        question = await catalog.get("q-dating")
        assert question.tags == ["dating", "fun"]


class TestDailyPromptAndAnswers:
    @pytest.fixture
    async def question(self, db_session):
        return await QuestionRepositoryImpl(db_session).add(
            Question(id="q1", text="What made you smile?", tags=["light"])
        )

    async def test_create_if_absent_keeps_first(self, db_session, paired, question):
        await QuestionRepositoryImpl(db_session).add(Question(id="q2", text="Other?"))
        repo = DailyPromptRepositoryImpl(db_session)
        first = await repo.create_if_absent(
            DailyPrompt(couple_id=paired.id, date_key=DAY, question_id="q1", created_at=utcnow())
        )
        second = await repo.create_if_absent(
            DailyPrompt(couple_id=paired.id, date_key=DAY, question_id="q2", created_at=utcnow())
        )
        assert first.question_id == "q1"
        assert second.question_id == "q1"
        assert second.question.text == "What made you smile?"
        assert second.question.tags == ["light"]

    async def test_mark_unlocked_once(self, db_session, paired, question):
        repo = DailyPromptRepositoryImpl(db_session)
        await repo.create_if_absent(
            DailyPrompt(couple_id=paired.id, date_key=DAY, question_id="q1", created_at=utcnow())
        )
        first_at = utcnow()
        assert await repo.mark_unlocked(paired.id, DAY, first_at) is True
        assert await repo.mark_unlocked(paired.id, DAY, first_at + timedelta(minutes=5)) is False
        stored = await repo.get(paired.id, DAY)
        assert stored.unlocked_at == first_at

    async def test_answers_unique_per_user_and_day(self, db_session, paired):
        repo = AnswerRepositoryImpl(db_session)
        answer = Answer(couple_id=paired.id, date_key=DAY, user_id="alice", text="first", created_at=utcnow())
        await repo.create(answer)
        with pytest.raises(DuplicateAnswer):
            await repo.create(answer.model_copy(update={"text": "second"}))
        await repo.create(answer.model_copy(update={"user_id": "bob", "text": "mine"}))

        stored = await repo.get(paired.id, DAY, "alice")
        assert stored.text == "first"
        assert {a.user_id for a in await repo.list_for_day(paired.id, DAY)} == {"alice", "bob"}
        assert await repo.list_for_day(paired.id, "2025-03-02") == []


class TestActivityRepository:
    async def test_flags_only_accumulate(self, db_session, users):
        repo = ActivityRepositoryImpl(db_session)
        row = await repo.mark("alice", DAY, ActivityKind.PHOTO)
        assert row.did_photo and not row.did_mood

        row = await repo.mark("alice", DAY, ActivityKind.MOOD)
        assert row.did_photo and row.did_mood

        row = await repo.mark("alice", DAY, ActivityKind.PHOTO)
        assert row.did_photo and row.did_mood

    async def test_list_for_user(self, db_session, users):
        repo = ActivityRepositoryImpl(db_session)
        await repo.mark("alice", "2025-03-02", ActivityKind.BUCKET)
        await repo.mark("alice", "2025-03-01", ActivityKind.QUESTION_SUBMIT)
        await repo.mark("bob", "2025-03-01", ActivityKind.PHOTO)
        rows = await repo.list_for_user("alice")
        assert [r.date_key for r in rows] == ["2025-03-01", "2025-03-02"]
        assert await repo.get("carol", DAY) is None


class TestDatabaseUrl:
    def test_postgres_gets_asyncpg_driver(self):
        url, connect_args = resolve_database_url("postgresql://u:p@db:5432/app")
        assert url == "postgresql+asyncpg://u:p@db:5432/app"
        assert connect_args == {}

    def test_sslmode_moves_to_connect_args(self, monkeypatch):
        monkeypatch.delenv("DATABASE_SSL_VERIFY", raising=False)
        url, connect_args = resolve_database_url("postgresql://u:p@db/app?sslmode=require&application_name=x")
        assert url == "postgresql+asyncpg://u:p@db/app?application_name=x"
        assert "ssl" in connect_args

        monkeypatch.setenv("DATABASE_SSL_VERIFY", "true")
        _, strict = resolve_database_url("postgresql://u:p@db/app?sslmode=require")
        assert strict == {"ssl": True}

    def test_sqlite_untouched(self):
        assert resolve_database_url("sqlite+aiosqlite:///:memory:") == ("sqlite+aiosqlite:///:memory:", {})
