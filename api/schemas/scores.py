"""
Pydantic schemas for stored scores, the report and the wheel.
"""
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field, confloat

from scoring.report import SeriesPoint, VisionPoint


class DayScoresResponse(BaseModel):
    day: str
    scores: Dict[str, float]


class DaysResponse(BaseModel):
    days: List[str]


class ResetResponse(BaseModel):
    day: str
    deleted: int


class ReportResponse(BaseModel):
    groupBy: Literal["day", "month", "year"]
    topics: Dict[str, List[SeriesPoint]]
    vision: List[VisionPoint]


class WheelRequest(BaseModel):
    scores: Dict[str, confloat(allow_inf_nan=False)] = Field(default_factory=dict)
    size: float = Field(600, gt=0, le=4096)
    centerTopic: Optional[str] = None
