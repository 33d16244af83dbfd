from models.users import User
from models.refresh_tokens import RefreshToken
from models.chats import Chat
from models.messages import Message, MessageRole

__all__ = ["User", "RefreshToken", "Chat", "Message", "MessageRole"]
