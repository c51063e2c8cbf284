from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.orm import declarative_base
from uuid_extension import uuid7

Base = declarative_base()


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class BaseModel(TimestampMixin, Base):
    """Abstract base for every table: a time-ordered UUIDv7 string key plus timestamps."""
    __abstract__ = True

    id = Column(String(36), primary_key=True, default=lambda: str(uuid7()), index=True)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id}>"
