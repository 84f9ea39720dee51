"""
Domain entities passed between pipeline stages
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ValidatedUpload:
    """Upload that passed intake checks and is ready for staging"""
    original_filename: str
    safe_filename: str
    content_type: str
    content: bytes

    @property
    def file_size(self) -> int:
        return len(self.content)


@dataclass
class UploadedDocument:
    """A staged upload, owned by TemporaryFileManager until released"""
    original_name: str
    staged_path: Path
    content_type: str
    size: int


@dataclass
class ProcessedDocument:
    """Text extracted from a staged document"""
    text: str
    file_name: str
    file_size: int
    processing_method: str  # "pdfplumber", "decoded"


@dataclass(frozen=True)
class AnalysisPrompt:
    """Composed system instruction and user prompt for one request"""
    system: str
    user: str


@dataclass
class UserProfile:
    """User record as held by the record store"""
    id: str
    email: str
    username: str
    gender: Optional[str] = None
    avatar_id: Optional[str] = None
