from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sortex.db.base import Base
from sortex.models.common import TimestampMixin


class User(TimestampMixin, Base):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("points >= 0", name="ck_users_points_non_negative"),)

    # Issued by the identity provider, not generated here.
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)

    uploads = relationship("Upload", back_populates="user")
