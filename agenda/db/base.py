from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    # All timestamps are naive local time for the single business location.
    type_annotation_map = {
        datetime: DateTime(timezone=False),
    }
