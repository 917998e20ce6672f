"""
Pydantic schemas for the vision test API.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from scoring.vision import AcuityResult, LineReading, Prescription


class VisionTestRequest(BaseModel):
    """
    One vision test.

    Attributes:
        prescription: Eyeglass prescription fields as typed by the user
        readings: Chart lines read, typed or as a speech transcript
        osdi: Up to 12 OSDI answers (1-8); null for unanswered items
        tz: IANA timezone used to resolve the user's day on submit
    """
    prescription: Prescription = Field(default_factory=Prescription)
    readings: List[LineReading] = Field(default_factory=list)
    osdi: List[Optional[int]] = Field(default_factory=list, max_length=12)
    tz: Optional[str] = None


class VisionScoreResponse(BaseModel):
    overall: float
    prescription: float
    acuity: float
    osdi: float
    acuityDetail: AcuityResult
    day: Optional[str] = None
