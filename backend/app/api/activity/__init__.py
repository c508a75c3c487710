"""Activity API routes."""
from fastapi import APIRouter

from app.api.activity import routes_activity

router = APIRouter()

router.include_router(routes_activity.router, prefix="/activity", tags=["activity"])
