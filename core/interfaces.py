# core/interfaces.py
"""Core interfaces for the chat backend"""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from core.domain import ChatTurn, Document, ExtractionResult, PromptPart

# ============= Repository Interfaces =============
class IDocumentRepository(ABC):
    """
    Interface for document persistence (filename, extracted text, storage location).

    Does NOT handle: physical files (see IFileStorage).
    Implementations: SQLDocumentRepository.
    """

    @abstractmethod
    async def find_recent(self, limit: int) -> List[Document]:
        """Return up to `limit` documents, newest first."""
        pass

    @abstractmethod
    async def insert(self, document: Document) -> Document:
        """Persist a new document and return it as stored."""
        pass

    @abstractmethod
    async def find_by_name(self, filename: str) -> Optional[Document]:
        """Find a document by its original filename. None if absent."""
        pass


class IChatRepository(ABC):
    """Append-only chat history, keyed by session"""

    @abstractmethod
    async def insert(self, turn: ChatTurn) -> int:
        """Store a new turn and return its id."""
        pass

    @abstractmethod
    async def update(self, turn_id: int, assistant_message: str) -> None:
        """Set the assistant message of an existing turn."""
        pass

    @abstractmethod
    async def find_by_session(self, session_id: str, limit: int = 200) -> List[ChatTurn]:
        """Turns of a session in ascending creation order."""
        pass

# ============= Text Extraction Interface =============
class ITextExtractor(ABC):
    """Converts file bytes into plain text."""

    @abstractmethod
    async def extract_result(self, data: bytes, filename: str) -> ExtractionResult:
        """
        Extract text, reporting failure in the result instead of raising.

        Unsupported extensions and unreadable content both produce a result
        with empty text and `error` set.
        """
        pass

    async def extract(self, data: bytes, filename: str) -> str:
        """Extract text; empty string on any failure. Never raises."""
        result = await self.extract_result(data, filename)
        return result.text if result.ok else ""

# ============= Completion Service Interface =============
class ICompletionService(ABC):
    """Opaque generative-AI call: prompt parts in, generated text out."""

    @abstractmethod
    async def complete(self, parts: Sequence[PromptPart]) -> str:
        """
        Generate assistant text from ordered prompt parts.

        Raises:
            CompletionError: missing credentials, network failure, or upstream rejection
        """
        pass

# ============= File Storage Interface =============
class IFileStorage(ABC):
    """Interface for physical file storage operations"""

    @abstractmethod
    async def save(self, content: bytes, filename: str) -> str:
        """
        Write `content` under `filename` in the storage directory.

        The filename should already be sanitized and unique (typically
        UUID-based) by the caller.

        Returns:
            str: Full path to the saved file
        """
        pass

    @abstractmethod
    def public_url(self, filename: str) -> str:
        """URL under which a stored file is served."""
        pass
