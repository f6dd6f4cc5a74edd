import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session
from sqlalchemy.future import select

from ..db.models import User as UserModel, Token as TokenModel


def store_token(
    db: Session,
    user_id: int,
    token_jti: str,
    expires_at: datetime.datetime,
) -> TokenModel:
    token = TokenModel(user_id=user_id, jti=token_jti, expires_at=expires_at)
    db.add(token)
    db.commit()
    db.refresh(token)
    return token


def get_token(db: Session, token_jti: str) -> TokenModel | None:
    return db.execute(select(TokenModel).filter_by(jti=token_jti)).scalar_one_or_none()


def invalidate_token(db: Session, token_jti: str) -> None:
    db.execute(update(TokenModel).filter_by(jti=token_jti).values(is_active=False))
    db.commit()


def invalidate_all_user_tokens(db: Session, user: UserModel) -> None:
    db.execute(
        update(TokenModel)
        .filter_by(user_id=user.id, is_active=True)
        .values(is_active=False)
    )
    db.commit()
