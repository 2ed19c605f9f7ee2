"""
Users API: list, update, delete (token required), forgot/reset password (no token).
Any authenticated user may manage any user unless RESTRICT_USER_ADMIN is set (see can_manage_user).
Deleting a user deletes that user's analyses.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from gradestats.config import Settings
from gradestats.database import get_db
from gradestats.models.user import User
from gradestats.schemas.auth import MessageResponse
from gradestats.schemas.user import (
    UserResponse,
    UserUpdateRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
)
from gradestats.services.auth import TokenPayload, hash_password
from gradestats.api.deps import can_manage_user, get_current_user, settings_dep, internal_error

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)

FORBIDDEN_MSG = "Not allowed to manage this user"


def _forbid_unless(allowed: bool) -> None:
    if not allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_MSG)


@router.get("", response_model=list[UserResponse])
def list_users(
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
):
    """List all users (password hash never included)."""
    _forbid_unless(can_manage_user(current_user, None, settings))
    try:
        users = db.query(User).order_by(User.id).all()
    except Exception as e:
        logger.exception("List users failed: %s", e)
        raise internal_error(settings, "Error fetching users", e)
    return [UserResponse.model_validate(u) for u in users]


@router.put("/{user_id}", response_model=MessageResponse)
def update_user(
    user_id: int,
    data: UserUpdateRequest,
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
):
    """Update allow-listed user fields; password is re-hashed."""
    _forbid_unless(can_manage_user(current_user, user_id, settings))
    changes = data.model_dump(exclude_unset=True)
    if "role" in changes and settings.restrict_user_admin and current_user.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only admins can change role")
    try:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        for field, value in changes.items():
            if field == "password":
                value = hash_password(value, rounds=settings.bcrypt_rounds)
            setattr(user, field, value)
        db.commit()
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Update user %s failed: %s", user_id, e)
        raise internal_error(settings, "Error updating user", e)
    logger.info("User id=%s updated by user id=%s (fields=%s)", user_id, current_user.id, sorted(changes))
    return MessageResponse(message="User updated successfully")


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
):
    """Delete a user and, by cascade, the user's analyses."""
    _forbid_unless(can_manage_user(current_user, user_id, settings))
    try:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        db.delete(user)
        db.commit()
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Delete user %s failed: %s", user_id, e)
        raise internal_error(settings, "Error deleting user", e)
    logger.info("User id=%s deleted by user id=%s", user_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    data: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
):
    """Start a password reset for an existing email. Nothing is sent; 404 if the email is unknown."""
    try:
        user = db.query(User).filter(User.email == data.email).first()
    except Exception as e:
        logger.exception("Forgot password lookup failed: %s", e)
        raise internal_error(settings, "Error initiating password reset", e)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info("Password reset initiated for user id=%s", user.id)
    return MessageResponse(message="Password reset initiated")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    data: ResetPasswordRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
):
    """Set a new password given only the email. No reset token is checked."""
    try:
        user = db.query(User).filter(User.email == data.email).first()
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        user.password = hash_password(data.new_password, rounds=settings.bcrypt_rounds)
        db.commit()
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Reset password failed: %s", e)
        raise internal_error(settings, "Error resetting password", e)
    logger.warning("Password reset without verification for user id=%s", user.id)
    return MessageResponse(message="Password reset successfully")
