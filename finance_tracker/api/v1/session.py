"""POST /v1/register, /v1/login, /v1/logout, /v1/refresh - session and cache lifecycle"""

import logging
from fastapi import APIRouter, Depends, Request

from finance_tracker.api.v1.schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshResponse,
    RegisterRequest,
    UserSchema,
)
from finance_tracker.api.dependencies import get_request_id, get_tracker
from finance_tracker.tracker import FinanceTracker

router = APIRouter()


@router.post("/register", response_model=MessageResponse)
async def register(request_body: RegisterRequest, tracker: FinanceTracker = Depends(get_tracker)):
    """Create an account on the finance service. Does not log in."""
    message = await tracker.session.register(request_body.username, request_body.email, request_body.password)
    return MessageResponse(message=message)


@router.post("/login", response_model=LoginResponse)
async def login(
    request_body: LoginRequest,
    request: Request,
    tracker: FinanceTracker = Depends(get_tracker),
):
    """
    Authenticate against the finance service and load the user's data.

    A refresh that only partly succeeds still logs the user in.
    """
    token, user = await tracker.login(request_body.email, request_body.password)
    logging.info("Login completed", extra={"request_id": get_request_id(request), "user_id": str(user.id)})
    return LoginResponse(token=token, user=UserSchema.from_domain(user))


@router.post("/logout", response_model=MessageResponse)
def logout(tracker: FinanceTracker = Depends(get_tracker)):
    tracker.logout()
    return MessageResponse(message="Logged out")


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(tracker: FinanceTracker = Depends(get_tracker)):
    """Refetch every collection; failed collections keep their last known value"""
    result = await tracker.cache.refresh()
    return RefreshResponse(updated=result.updated, failed=result.failed)
