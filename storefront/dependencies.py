from typing import Annotated, Callable

import jwt
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from .core.config import oauth2_scheme
from .core.security import decode_access_token
from .crud import user as user_crud, token as token_crud
from .db.enums import UserRoleType
from .db.models import User, Token
from .db.session import SessionLocal
from .services.cart import CartService


def get_db():
    """Manage the database session by creating a new session for each request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_token(
    db: Annotated[Session, Depends(get_db)],
    token: Annotated[str, Depends(oauth2_scheme)],
) -> Token:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authorized to access this route",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        jti = payload.get("jti")
        subject = payload.get("sub")
        if jti is None or subject is None:
            raise credentials_exception
        user_id = int(subject)
    except (jwt.PyJWTError, ValueError):
        raise credentials_exception

    # Check the token in the database, logout revokes it
    db_token = token_crud.get_token(db, jti)
    if db_token is None or not db_token.is_active or db_token.user_id != user_id:
        raise credentials_exception
    return db_token


def get_current_user(
    db: Annotated[Session, Depends(get_db)],
    db_token: Annotated[Token, Depends(get_current_token)],
) -> User:
    user = user_crud.get_user(db, db_token.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized to access this route",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    if current_user.is_active:
        return current_user
    else:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="This user is currently inactive",
        )


def require_roles(*roles: UserRoleType) -> Callable[..., User]:
    """Build a dependency that only lets users with one of `roles` through."""
    allowed = {role.value for role in roles}

    def role_checker(
        current_user: Annotated[User, Depends(get_current_active_user)]
    ) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User role {current_user.role} is not authorized to access this route",
            )
        return current_user

    return role_checker


get_current_active_admin = require_roles(UserRoleType.ADMIN)


def get_cart_service(db: Annotated[Session, Depends(get_db)]) -> CartService:
    return CartService(db)
