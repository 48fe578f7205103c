"""
SurgiEval — Topics Routes

Каталог тем станцій.
"""

from fastapi import APIRouter

from surgi_eval.schemas import ExamMode, topics_for
from ..models import TopicsResponse

router = APIRouter(prefix="/topics", tags=["Topics"])


@router.get("", response_model=TopicsResponse)
async def list_topics(mode: ExamMode = ExamMode.CASE) -> TopicsResponse:
    """
    Теми для режиму:
    - **CASE**: клінічні випадки
    - **PROCEDURE**: процедури
    """
    topics = topics_for(mode)
    return TopicsResponse(mode=mode, topics=topics, total=len(topics))
