"""Couple pairing routes."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from app.api.deps import get_current_user, get_pairing_service
from app.domain.common.types import ApiResponse
from app.domain.pairing.models import Couple, CoupleState, User
from app.domain.pairing.services import PairingService

router = APIRouter()


# Request/Response Models
class JoinCoupleRequest(BaseModel):
    """Join couple request."""
    code: str


class RelationshipProfileRequest(BaseModel):
    """Relationship profile update; omitted fields are left unchanged."""
    relationship_type: Optional[str] = None
    relationship_start_date: Optional[date] = None


class CurrentCoupleResponse(BaseModel):
    """The caller's couple, if any, and its state from the caller's point of view."""
    state: CoupleState
    couple: Optional[Couple] = None
    partner_id: Optional[str] = None


@router.post("", response_model=ApiResponse[Couple], status_code=status.HTTP_201_CREATED)
async def create_couple(
    current_user: User = Depends(get_current_user),
    service: PairingService = Depends(get_pairing_service),
):
    """Create a pending couple and return its invite code."""
    couple = await service.create_couple(current_user.id)
    return ApiResponse.ok(couple)


@router.post("/join", response_model=ApiResponse[Couple])
async def join_couple(
    request: JoinCoupleRequest,
    current_user: User = Depends(get_current_user),
    service: PairingService = Depends(get_pairing_service),
):
    """Join a pending couple with its invite code."""
    couple = await service.join_couple(current_user.id, request.code)
    return ApiResponse.ok(couple)


@router.get("/me", response_model=ApiResponse[CurrentCoupleResponse])
async def get_current_couple(
    current_user: User = Depends(get_current_user),
    service: PairingService = Depends(get_pairing_service),
):
    """Get the caller's couple. Being unpaired is not an error."""
    couple = await service.get_current_couple(current_user.id)
    if couple is None:
        return ApiResponse.ok(CurrentCoupleResponse(state=CoupleState.UNPAIRED))
    return ApiResponse.ok(
        CurrentCoupleResponse(
            state=couple.state,
            couple=couple,
            partner_id=couple.partner_of(current_user.id),
        )
    )


@router.delete("/me", response_model=ApiResponse)
async def unpair_couple(
    current_user: User = Depends(get_current_user),
    service: PairingService = Depends(get_pairing_service),
):
    """Leave (member_b) or dissolve (member_a) the caller's couple."""
    await service.unpair_couple(current_user.id)
    return ApiResponse.ok()


@router.post("/me/invite-code", response_model=ApiResponse[Couple])
async def regenerate_invite_code(
    current_user: User = Depends(get_current_user),
    service: PairingService = Depends(get_pairing_service),
):
    couple = await service.regenerate_invite_code(current_user.id)
    return ApiResponse.ok(couple)


@router.patch("/me/profile", response_model=ApiResponse[Couple])
async def update_relationship_profile(
    request: RelationshipProfileRequest,
    current_user: User = Depends(get_current_user),
    service: PairingService = Depends(get_pairing_service),
):
    couple = await service.update_relationship_profile(
        current_user.id,
        relationship_type=request.relationship_type,
        relationship_start_date=request.relationship_start_date,
    )
    return ApiResponse.ok(couple)
