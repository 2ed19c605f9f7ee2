"""
Auth routes: register (default role "user"), login (JWT in {token}).
Login answers the same 401 for unknown email and wrong password.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from gradestats.config import Settings
from gradestats.database import get_db
from gradestats.models.user import User
from gradestats.schemas.auth import RegisterRequest, LoginRequest, TokenResponse, MessageResponse
from gradestats.services.auth import TokenService, burn_password_check, hash_password, verify_password
from gradestats.api.deps import settings_dep, get_token_service, internal_error

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
):
    """Register a new user; role defaults to "user" (always "user" when RESTRICT_USER_ADMIN is on)."""
    role = data.role or "user"
    if settings.restrict_user_admin:
        role = "user"
    try:
        user = User(
            username=data.username,
            email=data.email,
            password=hash_password(data.password, rounds=settings.bcrypt_rounds),
            department=data.department,
            category=data.category,
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    except Exception as e:
        db.rollback()
        logger.exception("Register failed: %s", e)
        raise internal_error(settings, "Error registering user", e)
    logger.info("Registered user id=%s", user.id)
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=TokenResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
    tokens: TokenService = Depends(get_token_service),
):
    """Login with email/password; returns a token valid for JWT_EXPIRE_MINUTES."""
    try:
        user = db.query(User).filter(User.email == data.email).first()
    except Exception as e:
        logger.exception("Login lookup failed: %s", e)
        raise internal_error(settings, "Error logging in user", e)
    if not user:
        burn_password_check(data.password, rounds=settings.bcrypt_rounds)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not verify_password(data.password, user.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return TokenResponse(token=tokens.issue(user.id, user.role))
