from typing import Optional

from sqlalchemy import Engine

from .base import Base
from .session import engine as default_engine


def init_db(engine: Optional[Engine] = None):
    from . import models  # Import models here to ensure they are registered correctly

    Base.metadata.create_all(bind=engine or default_engine)
