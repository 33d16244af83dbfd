from sqlalchemy.sql import func
from sqlalchemy import Column, DateTime


class CreatedAtMixin:
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())
class UpdatedAtMixin:
    updated_at = Column(DateTime(timezone=True), nullable=False, default=func.now(), onupdate=func.now())
class SoftDeleteMixin:
    # NULL while the row is live
    deleted_at = Column(DateTime(timezone=True), nullable=True)
