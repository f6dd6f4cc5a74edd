from sqlalchemy.future import select
from sqlalchemy.orm import Session

from ..db.enums import UserRoleType
from ..db.models import User as UserModel, Cart as CartModel
from ..core.security import hash_password
from ..schemas.user import UserCreate


def get_user(db: Session, user_id: int) -> UserModel | None:
    return db.execute(select(UserModel).filter_by(id=user_id)).scalar_one_or_none()


def get_user_by_email(db: Session, email: str) -> UserModel | None:
    return db.execute(
        select(UserModel).filter_by(email=email.lower())
    ).scalar_one_or_none()


def update_user(db: Session, user: UserModel, **kwargs) -> UserModel:
    for key, value in kwargs.items():
        if not hasattr(user, key):
            raise ValueError(f"User model does not have attribute {key}")
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


def create_user(
    db: Session,
    user: UserCreate,
    role: UserRoleType = UserRoleType.USER,
    with_cart: bool = True,
) -> UserModel:
    user_data = user.model_dump()
    hashed_password = hash_password(user_data.pop("password"))
    db_user = UserModel(**user_data, role=role.value, hashed_password=hashed_password)
    if with_cart:
        db_user.cart = CartModel()
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def change_password(db: Session, user: UserModel, new_password: str) -> UserModel:
    return update_user(db, user, hashed_password=hash_password(new_password))


def deactivate_user(db: Session, user: UserModel) -> UserModel:
    """Soft delete: the row stays, the account can no longer log in."""
    return update_user(db, user, is_active=False)
