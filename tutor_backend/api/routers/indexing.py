"""Lesson indexing API endpoints.

Routes:
- POST /ai/lessons/{lesson_id}/index - Re-index a lesson in the background

Dependencies: tutor_backend.application.services.indexing_service, tutor_backend.boundary.db
System role: Trigger for keeping lesson embeddings in sync
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from tutor_backend.api.deps import get_lesson_indexer
from tutor_backend.application.services import LessonIndexer
from tutor_backend.boundary.db.CRUD import lesson_crud


class IndexLessonResponse(BaseModel):
    """Accepted indexing job."""

    lesson_id: UUID
    status: str = "scheduled"


router = APIRouter(prefix="/ai/lessons", tags=["indexing"])


@router.post(
    "/{lesson_id}/index",
    response_model=IndexLessonResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def index_lesson(
    lesson_id: UUID,
    request: Request,
    indexer: LessonIndexer = Depends(get_lesson_indexer),
) -> IndexLessonResponse:
    """Schedule background indexing of a lesson's current content.

    Raises:
        HTTPException(404): Lesson not found
    """
    async with request.app.state.session_factory() as db:
        lesson = await lesson_crud.get_by_id(db, lesson_id)

    if lesson is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Lesson {lesson_id} not found",
        )

    indexer.schedule_index(lesson.id, lesson.course_id, lesson.content)
    return IndexLessonResponse(lesson_id=lesson.id)
