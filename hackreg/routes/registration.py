"""
HackReg Backend - Registration Status Route
=============================================

What:  GET /registration/status/, a public check of the registration window.
Who:   Called by the frontend to decide whether to show the submit form.
"""

from fastapi import APIRouter

from hackreg.schemas.challenge import RegistrationStatusResponse
from hackreg.services.registration import is_registration_alive

router = APIRouter(prefix="/registration", tags=["Registration"])


@router.get(
    "/status/",
    response_model=RegistrationStatusResponse,
    summary="Whether registration is currently open",
    description="Public endpoint; no authentication required.",
)
async def registration_status() -> RegistrationStatusResponse:
    return RegistrationStatusResponse(alive=is_registration_alive())
