"""Pydantic schemas for API models."""
from .questionnaire import (
    TopicSummary,
    TopicListResponse,
    QuestionSetResponse,
    AnswerSubmission,
    SubmissionResponse,
)
from .vision import VisionTestRequest, VisionScoreResponse
from .scores import (
    DayScoresResponse,
    DaysResponse,
    ResetResponse,
    ReportResponse,
    WheelRequest,
)
from .education import VideoSearchRequest, VideoSearchResponse
from .smart_tip import SmartTipRequest


__all__ = [
    "TopicSummary",
    "TopicListResponse",
    "QuestionSetResponse",
    "AnswerSubmission",
    "SubmissionResponse",
    "VisionTestRequest",
    "VisionScoreResponse",
    "DayScoresResponse",
    "DaysResponse",
    "ResetResponse",
    "ReportResponse",
    "WheelRequest",
    "VideoSearchRequest",
    "VideoSearchResponse",
    "SmartTipRequest",
]
