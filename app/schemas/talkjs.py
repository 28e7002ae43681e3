from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class KeyType(str, Enum):
    DEV = "dev"
    PROD = "prod"

    @classmethod
    def resolve(cls, value: Optional[str]) -> "KeyType":
        """Cualquier valor distinto de 'prod' se trata como 'dev'."""
        if isinstance(value, cls):
            return value
        return cls.PROD if value == cls.PROD.value else cls.DEV


class TalkJSModel(BaseModel):
    # Valores de TalkJS sin coerción de tipos; los no declarados también se devuelven tal cual
    model_config = ConfigDict(extra="allow")


class Message(TalkJSModel):
    id: Any = None
    conversationId: Any = None
    senderId: Any = None
    type: Any = None
    text: Any = None
    createdAt: Any = None


class Conversation(TalkJSModel):
    id: Any = None
    subject: Any = None
    participants: Any = None
    createdAt: Any = None
    lastMessage: Optional[Message] = None

    @classmethod
    def from_talkjs(cls, data: Dict[str, Any]) -> "Conversation":
        raw_last = data.get("lastMessage")
        last_message = Message.model_validate(raw_last) if isinstance(raw_last, dict) else None
        return cls.model_validate({**data, "lastMessage": last_message})


class ParticipantRequest(BaseModel):
    access: Optional[str] = None
    notify: Optional[bool] = None


class ConversationListResponse(BaseModel):
    data: List[Conversation]


class ConversationResponse(BaseModel):
    data: Conversation


class UserConversationsResponse(BaseModel):
    conversations: List[Any]


class UserListResponse(BaseModel):
    users: List[Any]
