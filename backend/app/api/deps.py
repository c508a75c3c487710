"""API dependencies."""
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.infra.db.session import get_db
from app.infra.security.jwt import decode_token
from app.domain.activity.services import ActivityService
from app.domain.common import messages
from app.domain.common.types import today_key
from app.domain.daily_question.services import DailyQuestionService
from app.domain.pairing.models import User
from app.domain.pairing.repositories import UserRepository
from app.domain.pairing.services import PairingService
from app.infra.db.repositories.activity_repo import ActivityRepositoryImpl
from app.infra.db.repositories.answer_repo import AnswerRepositoryImpl
from app.infra.db.repositories.couple_repo import CoupleRepositoryImpl
from app.infra.db.repositories.daily_prompt_repo import DailyPromptRepositoryImpl
from app.infra.db.repositories.question_repo import QuestionRepositoryImpl
from app.infra.db.repositories.user_repo import UserRepositoryImpl
from app.settings import settings

# Tokens are issued by the external auth provider; tokenUrl only feeds the OpenAPI docs.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/v1/auth/token", auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=messages.NOT_AUTHENTICATED,
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_exception

    payload = decode_token(token)
    if payload is None:
        raise credentials_exception

    user_id: str = payload.get("sub")
    token_type: str = payload.get("type")
    if user_id is None or token_type != "access":
        raise credentials_exception

    user_repo: UserRepository = UserRepositoryImpl(db)
    user = await user_repo.get_by_id(user_id)
    if user is None:
        raise credentials_exception

    return user


def resolve_date_key(date_key: Optional[str]) -> str:
    """Caller's date_key, or today in the reference timezone."""
    return date_key or today_key(settings.reference_timezone)


def get_pairing_service(db: AsyncSession = Depends(get_db)) -> PairingService:
    return PairingService(CoupleRepositoryImpl(db), invite_code_length=settings.invite_code_length)


def get_activity_service(db: AsyncSession = Depends(get_db)) -> ActivityService:
    return ActivityService(ActivityRepositoryImpl(db), timezone_name=settings.reference_timezone)


def get_daily_question_service(
    db: AsyncSession = Depends(get_db),
    activity: ActivityService = Depends(get_activity_service),
) -> DailyQuestionService:
    return DailyQuestionService(
        QuestionRepositoryImpl(db),
        DailyPromptRepositoryImpl(db),
        AnswerRepositoryImpl(db),
        activity=activity,
        repeat_window_days=settings.question_repeat_window_days,
        default_relationship_type=settings.default_relationship_type,
    )
