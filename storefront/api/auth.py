from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.debug import logger
from ..core.security import encode_access_token, verify_password
from ..crud import token as token_crud
from ..crud.user import create_user, get_user_by_email
from ..db.models import User as UserModel, Token as TokenModel
from ..dependencies import get_db, get_current_active_user, get_current_token
from ..schemas.auth import AuthData, LoginRequest
from ..schemas.common import Envelope
from ..schemas.user import UserCreate, UserData

router = APIRouter(prefix="/api/auth", tags=["auth"])


def issue_token(db: Session, user: UserModel) -> str:
    """Sign a new access token for `user` and record its jti so it can be revoked."""
    token, jti, expires_at = encode_access_token(user.id)
    token_crud.store_token(db, user_id=user.id, token_jti=jti, expires_at=expires_at)
    return token


def authenticate(db: Session, email: str, password: str) -> UserModel:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    user = get_user_by_email(db, email)
    if user is None or not user.is_active:
        raise credentials_exception
    if not verify_password(password, user.hashed_password):
        raise credentials_exception
    return user


@router.post(
    "/register",
    response_model=Envelope[AuthData],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def register(
    user_scheme: UserCreate,
    db: Annotated[Session, Depends(get_db)],
):
    if get_user_by_email(db, user_scheme.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists with this email",
        )
    try:
        user = create_user(db, user_scheme)
    except IntegrityError as e:
        logger.error(f"Error registering user: {e}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists with this email",
        )
    logger.info(f"Registered user {user.id}")
    return {
        "success": True,
        "message": "User registered successfully",
        "data": {"user": user, "token": issue_token(db, user)},
    }


@router.post(
    "/login",
    response_model=Envelope[AuthData],
    status_code=status.HTTP_200_OK,
    summary="Login to the application",
)
def login(
    credentials: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
):
    user = authenticate(db, credentials.email, credentials.password)
    return {
        "success": True,
        "message": "Login successful",
        "data": {"user": user, "token": issue_token(db, user)},
    }


@router.get(
    "/me",
    response_model=Envelope[UserData],
    status_code=status.HTTP_200_OK,
    summary="Get the current user",
)
def read_me(current_user: Annotated[UserModel, Depends(get_current_active_user)]):
    return {"success": True, "data": {"user": current_user}}


@router.post(
    "/logout",
    response_model=Envelope[None],
    status_code=status.HTTP_200_OK,
    summary="Logout from the application",
    dependencies=[Depends(get_current_active_user)],
)
def logout(
    db: Annotated[Session, Depends(get_db)],
    db_token: Annotated[TokenModel, Depends(get_current_token)],
):
    token_crud.invalidate_token(db, db_token.jti)
    return {"success": True, "message": "Logout successful"}
