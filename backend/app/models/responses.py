"""
Response envelopes returned by the API
"""
from typing import Optional

from pydantic import BaseModel

from app.models.analysis import AnalysisResult


class GenerateResponse(BaseModel):
    """Successful analysis envelope"""
    success: bool = True
    data: AnalysisResult


class ErrorResponse(BaseModel):
    """Failure envelope; `error` carries a diagnostic string for parse and server errors"""
    success: bool = False
    message: str
    error: Optional[str] = None


class ProfileResponse(BaseModel):
    email: str
    username: str
    gender: Optional[str] = None
    avatar_id: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
