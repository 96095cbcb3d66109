"""ORM model for per-user data buckets (opaque JSON text keyed by bucket name)."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from mediagate.models.base import Base


class UserData(Base):
    """One row per (user, bucket key); removed with its owner."""

    __tablename__ = "user_data"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    data_key = Column(String(100), primary_key=True)
    data_value = Column(Text, nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    user = relationship("User", back_populates="data")
