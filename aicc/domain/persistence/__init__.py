from aicc.domain.persistence.conversation_store import ConversationStore

__all__ = ["ConversationStore"]
