import enum
from core.database import Base
from sqlalchemy import Column, Integer, String, ForeignKey, JSON, CheckConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship


class MessageRole(str, enum.Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint(
            "role IN ('system', 'user', 'assistant', 'tool')",
            name="ck_messages_role",
        ),
    )

    #pk (client-generated id)
    id = Column(String(255), primary_key=True)

    #fk
    chat_id = Column(Integer, ForeignKey("chats.id"), nullable=False, index=True)

    #relationships
    chat = relationship("Chat", back_populates="messages")

    role = Column(String(255), nullable=False)
    # Opaque structured payload from the chat client
    content = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)
