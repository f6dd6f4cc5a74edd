import datetime
import uuid
from typing import Any, Optional

import jwt

from .config import password_context, settings


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify the password
    ### Arguments
    - plain_password (str): The plain text password
    - hashed_password (str): The hashed password
    """
    return password_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    """
    Hash the password
    ### Arguments
    - password (str): The plain text password
    """
    return password_context.hash(password)


def encode_access_token(
    user_id: int, expires_delta: Optional[datetime.timedelta] = None
) -> tuple[str, str, datetime.datetime]:
    """
    Build a signed access token for a user.
    ### Arguments
    - user_id (int): The user the token is issued to
    - expires_delta (timedelta, optional): Lifetime, defaults to the configured one
    ### Returns
    - (token, jti, expires_at)
    """
    if expires_delta is None:
        expires_delta = datetime.timedelta(minutes=settings.access_token_expire_minutes)
    expire = datetime.datetime.now(datetime.UTC) + expires_delta
    jti = str(uuid.uuid4())
    to_encode = {"sub": str(user_id), "jti": jti, "exp": expire}
    token = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return token, jti, expire


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a token, raising `jwt.PyJWTError` when it is not valid."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
