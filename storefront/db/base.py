from sqlalchemy.orm import DeclarativeBase

# Integer keys are stored as signed 64-bit values
MAX_ID = 2**63 - 1


def fits_id(value: int) -> bool:
    """Whether `value` can be bound to an integer key column at all."""
    return -MAX_ID - 1 <= value <= MAX_ID


class Base(DeclarativeBase):
    pass
