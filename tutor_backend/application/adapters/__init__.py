"""
Application adapters.

Exports ConversationStore for assistant conversation memory.
"""

from tutor_backend.application.adapters.conversation_store import ConversationStore

__all__ = ["ConversationStore"]
