from core.database import Base
from sqlalchemy import Column, Boolean, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from models.mixins import CreatedAtMixin, UpdatedAtMixin, SoftDeleteMixin

class Chat(Base, CreatedAtMixin, UpdatedAtMixin, SoftDeleteMixin):
    __tablename__ = "chats"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="chats")
    messages = relationship("Message", back_populates="chat")

    title = Column(String(255), nullable=False)
    is_public = Column(Boolean, nullable=False, default=False)
