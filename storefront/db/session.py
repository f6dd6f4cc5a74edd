from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ..core.config import settings

SQLALCHEMY_DATABASE_URL = settings.database_url

connect_args = (
    {"check_same_thread": False}
    if SQLALCHEMY_DATABASE_URL.startswith("sqlite")
    else {}
)

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
