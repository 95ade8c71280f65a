"""SQLAlchemy ORM models — maps to the like_counters table."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from class_likes.adapters.persistence.database import Base


class LikeCounterModel(Base):
    __tablename__ = "like_counters"

    class_id: Mapped[str] = mapped_column(String(200), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (CheckConstraint("count >= 0", name="ck_like_counters_non_negative"),)
