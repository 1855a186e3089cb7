"""
Application services.

Exports the assistant pipeline services.
"""

from tutor_backend.application.services.assistant_service import AssistantOrchestrator
from tutor_backend.application.services.indexing_service import LessonIndexer
from tutor_backend.application.services.public_assistant_service import PublicAssistantService
from tutor_backend.application.services.retrieval_service import RetrievalIndex

__all__ = [
    "AssistantOrchestrator",
    "LessonIndexer",
    "PublicAssistantService",
    "RetrievalIndex",
]
