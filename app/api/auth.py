# Authentication API routes for registration, login, logout and profile updates

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.config import settings
from app.db import get_db_manager
from app.db_handlers import DatabaseManager, DuplicateEmailError, RecordNotFoundError
from app.dependencies.auth import get_current_user, get_current_user_optional
from app.schemas import (
    AuthResponse,
    LoggedInResponse,
    MessageResponse,
    UserCreateData,
    UserInfo,
    UserLogin,
    UserProfileUpdate,
    UserRecord,
    UserRegister,
    UserUpdateData,
)
from app.utils.auth import create_access_token, get_password_hash, verify_password
from app.utils.logger import setup_logger

logger = setup_logger("api.auth")

router = APIRouter(prefix="/auth", tags=["Authentication"])

MIN_PASSWORD_LENGTH = 8


def _check_new_password(password: str, password_verify: str | None) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Please enter a password of at least {MIN_PASSWORD_LENGTH} characters.",
        )
    if password != password_verify:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please enter the same password twice.",
        )


def _set_auth_cookie(response: Response, user: UserRecord) -> None:
    access_token = create_access_token(data={"sub": user.id})
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=access_token,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )


@router.post("/register", response_model=AuthResponse)
async def register_user(
    user_data: UserRegister,
    response: Response,
    db: DatabaseManager = Depends(get_db_manager),
):
    """Register a new user and log them in."""
    _check_new_password(user_data.password, user_data.password_verify)

    existing_user = await db.find_user_by_email(user_data.email)
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email address already exists.",
        )

    # Password is hashed with bcrypt before storage
    try:
        user = await db.create_user(
            UserCreateData(
                first_name=user_data.first_name,
                last_name=user_data.last_name,
                email=user_data.email,
                password_hash=get_password_hash(user_data.password),
            )
        )
    except DuplicateEmailError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email address already exists.",
        ) from e

    logger.info(f"Registered user {user.id} ({user.email})")
    _set_auth_cookie(response, user)
    return AuthResponse(user=UserInfo.from_record(user))


@router.post("/login", response_model=AuthResponse)
async def login_user(
    user_data: UserLogin,
    response: Response,
    db: DatabaseManager = Depends(get_db_manager),
):
    """Authenticate a user and set the access token cookie."""
    user = await db.find_user_by_email(user_data.email)

    if not user or not verify_password(user_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Wrong email or password provided.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    _set_auth_cookie(response, user)
    return AuthResponse(user=UserInfo.from_record(user))


@router.get("/logout", response_model=MessageResponse)
async def logout_user(response: Response):
    response.delete_cookie(
        key=settings.auth_cookie_name,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
    )
    return MessageResponse(message="Logged out")


@router.get("/loggedIn", response_model=LoggedInResponse)
async def get_logged_in(
    current_user: UserRecord | None = Depends(get_current_user_optional),
):
    """Report whether the request carries a valid session."""
    if current_user is None:
        return LoggedInResponse(logged_in=False)
    return LoggedInResponse(logged_in=True, user=UserInfo.from_record(current_user))


@router.put("/me", response_model=AuthResponse)
async def update_profile(
    profile: UserProfileUpdate,
    current_user: UserRecord = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db_manager),
):
    """Update the current user's name and, optionally, password."""
    update = UserUpdateData(first_name=profile.first_name, last_name=profile.last_name)
    if profile.password is not None:
        _check_new_password(profile.password, profile.password_verify)
        update.password_hash = get_password_hash(profile.password)

    try:
        user = await db.update_user(current_user.id, update)
    except RecordNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        ) from e

    return AuthResponse(user=UserInfo.from_record(user))
