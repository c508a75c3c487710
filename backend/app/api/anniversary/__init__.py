"""Anniversary API routes."""
from fastapi import APIRouter

from app.api.anniversary import routes_anniversary

router = APIRouter()

router.include_router(routes_anniversary.router, prefix="/anniversary", tags=["anniversary"])
