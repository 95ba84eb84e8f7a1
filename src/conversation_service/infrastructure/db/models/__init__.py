"""Import all models so Alembic can discover them via Base.metadata."""
from conversation_service.infrastructure.db.models.conversation import ConversationModel
from conversation_service.infrastructure.db.models.member import MemberModel
from conversation_service.infrastructure.db.models.message import MessageModel

__all__ = [
    "ConversationModel",
    "MemberModel",
    "MessageModel",
]
