"""
Pydantic schemas for the smart tip API.
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class SmartTipRequest(BaseModel):
    """
    Attributes:
        day: ISO day whose scores feed the tip (defaults to today in tz)
        tz: IANA timezone used when day is omitted
        profile: Free-form profile details passed to the model
    """
    day: Optional[str] = None
    tz: Optional[str] = None
    profile: Dict[str, Any] = Field(default_factory=dict)
