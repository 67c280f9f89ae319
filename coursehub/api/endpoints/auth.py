# coursehub/api/endpoints/auth.py
import logging
import secrets
from datetime import timedelta

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from coursehub.core.config import settings
from coursehub.core.dates import as_utc, utcnow
from coursehub.core.exceptions import AuthenticationFailed, NotFoundError, ValidationFailed
from coursehub.core.security import (
    create_access_token,
    get_current_admin,
    get_current_user,
    get_password_hash,
    verify_password,
)
from coursehub.db.session import get_db
from coursehub.models.user import User
from coursehub.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileUpdate,
    RegisterRequest,
    ResetPasswordRequest,
    UserList,
    UserPublic,
)
from coursehub.services.email_service import email_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

USER_EXISTS = "User with this email or username already exists"


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: RegisterRequest, db: Session = Depends(get_db)):
    # 邮箱或用户名已存在
    existing = (
        db.query(User)
        .filter(or_(User.email == payload.email, User.username == payload.username))
        .first()
    )
    if existing:
        raise ValidationFailed(USER_EXISTS)

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=get_password_hash(payload.password),
        role=payload.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({user.email})")

    return AuthResponse(
        message="Registration successful",
        token=create_access_token(user),
        user=UserPublic.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email.strip()).first()
    if not user:
        raise NotFoundError("No user found with that email")
    if not verify_password(payload.password, user.password_hash):
        raise AuthenticationFailed("Invalid credentials")

    return AuthResponse(
        message="Login successful",
        token=create_access_token(user),
        user=UserPublic.model_validate(user),
    )


def _issue_reset_token(db: Session, email: str) -> tuple[int, str, str]:
    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise NotFoundError("No user found with that email")

    user.reset_token = secrets.token_hex(32)
    user.reset_token_expiry = utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    db.add(user)
    db.commit()
    return user.id, user.email, user.reset_token


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db)):
    # 数据库操作放到线程池，事件循环只负责发邮件
    user_id, email, token = await run_in_threadpool(
        _issue_reset_token, db, payload.email.strip()
    )

    reset_url = f"{settings.FRONTEND_URL}/reset-password?token={token}"
    await email_service.send_password_reset(email, reset_url)
    logger.info(f"Password reset requested for user {user_id}")

    return MessageResponse(message="Password reset link sent to your email")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.reset_token == payload.token).first()
    if (
        not user
        or user.reset_token_expiry is None
        or as_utc(user.reset_token_expiry) <= utcnow()
    ):
        raise ValidationFailed("Invalid or expired reset token")

    user.password_hash = get_password_hash(payload.new_password)
    # 单次有效
    user.reset_token = None
    user.reset_token_expiry = None
    db.add(user)
    db.commit()
    logger.info(f"Password reset completed for user {user.id}")

    return MessageResponse(message="Password reset successful")


@router.get("/profile", response_model=UserPublic)
def read_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/profile", response_model=UserPublic)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    update_data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if update_data:
        conditions = [getattr(User, field) == value for field, value in update_data.items()]
        taken = (
            db.query(User)
            .filter(User.id != current_user.id)
            .filter(or_(*conditions))
            .first()
        )
        if taken:
            raise ValidationFailed(USER_EXISTS)

    for field, value in update_data.items():
        setattr(current_user, field, value)
    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return current_user


@router.patch("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not verify_password(payload.current_password, current_user.password_hash):
        raise ValidationFailed("Current password is incorrect")

    current_user.password_hash = get_password_hash(payload.new_password)
    db.add(current_user)
    db.commit()
    return MessageResponse(message="Password changed successfully")


@router.get("/users", response_model=UserList)
def list_users(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    users = db.query(User).order_by(User.id).all()
    return UserList(users=[UserPublic.model_validate(u) for u in users])
