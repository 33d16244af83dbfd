from core.database import Base
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

class User(Base):
    __tablename__ = "users"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #relationships
    chats = relationship("Chat", back_populates="user")
    refresh_tokens = relationship("RefreshToken", back_populates="user")

    email = Column(String(255), unique=True, nullable=False)
    # bcrypt digest, never the plain password
    hash = Column(String(255), nullable=False)
    profile_picture_url = Column(String, nullable=True)
