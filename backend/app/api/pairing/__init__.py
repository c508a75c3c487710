"""Pairing API routes."""
from fastapi import APIRouter

from app.api.pairing import routes_couples

router = APIRouter()

router.include_router(routes_couples.router, prefix="/couples", tags=["couples"])
