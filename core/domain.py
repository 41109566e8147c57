# core/domain.py
"""Domain models, enumerations and errors shared across the application."""
from enum import Enum

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

# ============= Enums =============

class ErrorCode(str, Enum):
    """Error codes for user-facing error messages."""
    INVALID_REQUEST = "INVALID_REQUEST"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    COMPLETION_FAILED = "COMPLETION_FAILED"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"


# ============= Errors =============

class ChatBackendError(Exception):
    """Base error carrying an ErrorCode"""

    error_code: ErrorCode = ErrorCode.INVALID_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self):
        # Format used for logging
        return f"[{self.error_code.value}] {self.message}"


class InvalidRequestError(ChatBackendError):
    """Neither message text nor an attachment was supplied."""
    error_code = ErrorCode.INVALID_REQUEST


class ExtractionError(ChatBackendError):
    """Text could not be extracted from a file. Always recovered locally."""
    error_code = ErrorCode.EXTRACTION_FAILED


class CompletionError(ChatBackendError):
    """The completion call failed (credentials, network, upstream rejection)."""
    error_code = ErrorCode.COMPLETION_FAILED


class PersistenceError(ChatBackendError):
    """A store write failed."""
    error_code = ErrorCode.PERSISTENCE_FAILED


# ============= Domain Models =============

@dataclass
class Document:
    """An ingested document. `text` is empty when extraction yielded nothing."""
    id: str
    filename: str
    stored_name: str
    url: str
    text: str = ""
    uploaded_at: Optional[datetime] = None


@dataclass
class ChatTurn:
    """One user message and (once answered) the assistant message."""
    user_message: str
    session_id: Optional[str] = None
    assistant_message: Optional[str] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = None


@dataclass
class ScoredDocument:
    """Request-scoped pairing of a document with its relevance score"""
    document: Document
    score: int


@dataclass
class DocumentRef:
    """What the caller sees of a surfaced document"""
    filename: str
    url: str


@dataclass
class Attachment:
    """A file sent along with a chat message"""
    filename: str
    mime_type: str
    data: bytes


# ============= Prompt Parts =============

@dataclass
class TextPart:
    text: str


@dataclass
class BinaryPart:
    mime_type: str
    data: bytes


PromptPart = Union[TextPart, BinaryPart]


@dataclass
class ExtractionResult:
    """Outcome of a text extraction; `error` is set when nothing could be read."""
    text: str = ""
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.text)


@dataclass
class ChatResult:
    """
    Outcome of one chat transaction.

    `degraded` is True when `reply` is the fallback sentence rather than a
    genuine completion.
    """
    reply: str
    docs: List[DocumentRef] = field(default_factory=list)
    degraded: bool = False
    turn_id: Optional[int] = None
