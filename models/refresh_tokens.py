from datetime import datetime
from core.database import Base
from sqlalchemy import Column, DateTime, String, Integer, ForeignKey
from sqlalchemy.orm import relationship
from models.mixins import CreatedAtMixin, UpdatedAtMixin, SoftDeleteMixin
from utils.dates import as_utc

class RefreshToken(Base, CreatedAtMixin, UpdatedAtMixin, SoftDeleteMixin):
    """
    One issued session renewal right.

    The token is an opaque random string stored as-is together with the
    access token it was issued alongside. Tokens expire one calendar month
    after creation and are revoked by setting deleted_at.
    """
    __tablename__ = "refresh_tokens"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="refresh_tokens")

    token = Column(String(255), nullable=False, unique=True, index=True)
    access_token = Column(String(1024), nullable=False, unique=True)
    expired_at = Column(DateTime(timezone=True), nullable=False)

    def is_valid(self, now: datetime) -> bool:
        return self.deleted_at is None and as_utc(self.expired_at) > now
