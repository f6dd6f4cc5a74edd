from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..core.debug import logger
from ..core.security import verify_password
from ..crud import token as token_crud
from ..crud.user import (
    change_password as db_change_password,
    deactivate_user,
    get_user_by_email as db_get_user_by_email,
    update_user,
)
from ..db.models import User as UserModel
from ..dependencies import get_db, get_current_active_user
from ..schemas.auth import ChangePasswordRequest, DeleteAccountRequest
from ..schemas.common import Envelope
from ..schemas.user import UserData, UserUpdate

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get(
    "/profile",
    response_model=Envelope[UserData],
    status_code=status.HTTP_200_OK,
    summary="Get user profile",
)
def read_profile(
    current_user: Annotated[UserModel, Depends(get_current_active_user)]
):
    return {"success": True, "data": {"user": current_user}}


@router.put(
    "/profile",
    response_model=Envelope[UserData],
    status_code=status.HTTP_200_OK,
    summary="Update user profile",
)
def update_profile(
    payload: UserUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[UserModel, Depends(get_current_active_user)],
):
    """
    Update the fields present in the payload, leaving the others untouched.

    Moving to an email address that belongs to another account is rejected.
    """
    changes = payload.model_dump(exclude_none=True)
    email = changes.get("email")
    if email and email != current_user.email and db_get_user_by_email(db, email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already in use",
        )
    user = update_user(db, current_user, **changes)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": {"user": user},
    }


@router.put(
    "/password",
    response_model=Envelope[None],
    status_code=status.HTTP_200_OK,
    summary="Change password",
)
def change_password(
    payload: ChangePasswordRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[UserModel, Depends(get_current_active_user)],
):
    if not verify_password(payload.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )
    db_change_password(db, current_user, payload.new_password)
    logger.info(f"User {current_user.id} changed their password")
    return {"success": True, "message": "Password updated successfully"}


@router.delete(
    "/account",
    response_model=Envelope[None],
    status_code=status.HTTP_200_OK,
    summary="Deactivate user account",
)
def delete_account(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[UserModel, Depends(get_current_active_user)],
    payload: Optional[DeleteAccountRequest] = None,
):
    if payload is None or not payload.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Password confirmation is required to delete account",
        )
    if not verify_password(payload.password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Incorrect password",
        )
    deactivate_user(db, current_user)
    token_crud.invalidate_all_user_tokens(db, current_user)
    logger.info(f"User {current_user.id} deactivated their account")
    return {"success": True, "message": "Account deactivated successfully"}
