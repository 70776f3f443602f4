from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sortex.db.base import Base
from sortex.models.common import UUIDPrimaryKeyMixin, utcnow


class Upload(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "uploads"
    __table_args__ = (UniqueConstraint("user_id", "submission_key", name="uq_uploads_user_submission_key"),)

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_type: Mapped[str] = mapped_column(String(100), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    recycling_type: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    points_earned: Mapped[int] = mapped_column(Integer, nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    storage_key: Mapped[str] = mapped_column(String(500), nullable=False, unique=True)
    submission_key: Mapped[str | None] = mapped_column(String(128), nullable=True)

    user = relationship("User", back_populates="uploads")
