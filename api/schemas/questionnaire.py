"""
Pydantic schemas for the questionnaire API.
"""
from typing import Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field

from scoring.questions import Question


class TopicSummary(BaseModel):
    """
    One entry of the topic catalog.

    Attributes:
        topic: Topic name
        questionCount: Number of questions (0 for Vision Wellness)
        scoredBy: "questionnaire" or "vision" (scored by the vision test)
    """
    topic: str
    questionCount: int = Field(..., ge=0)
    scoredBy: Literal["questionnaire", "vision"]


class TopicListResponse(BaseModel):
    topics: List[TopicSummary]


class QuestionSetResponse(BaseModel):
    topic: str
    questions: List[Question]


class AnswerSubmission(BaseModel):
    """
    Answers keyed by question id. Values arrive as strings from form inputs
    but plain numbers are accepted too; nulls are ignored.
    """
    answers: Dict[str, Optional[Union[str, int, float]]] = Field(default_factory=dict)
    tz: Optional[str] = Field(None, description="IANA timezone used to resolve the user's day")


class SubmissionResponse(BaseModel):
    day: str
    topic: str
    score: float = Field(..., ge=0.0, le=1.0)
    raw_points: Optional[float] = None
    max_points: Optional[float] = None
