# services/chat_service.py
"""Chat transaction: retrieve, persist the user turn, complete, record the answer."""
import logging
from typing import List, Optional

from config import settings
from core.domain import (
    Attachment,
    ChatResult,
    ChatTurn,
    CompletionError,
    DocumentRef,
    InvalidRequestError,
    PersistenceError,
    ScoredDocument,
)
from core.interfaces import IChatRepository, ICompletionService, IDocumentRepository
from services.context_assembler import ContextAssembler
from services.retrieval import retrieve

logger = logging.getLogger(settings.LOGGER_NAME)

FALLBACK_REPLY = (
    "I'm sorry, I'm having trouble connecting to the AI service right now. "
    "Please try again later."
)


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


class ChatService:
    """
    Runs one chat turn end to end.

    The user turn is written before the completion call, so it survives any
    downstream failure. Once written, assembly and completion failures are
    answered with FALLBACK_REPLY instead of being raised. Store failures are
    raised as PersistenceError.
    """

    def __init__(
        self,
        document_repo: IDocumentRepository,
        chat_repo: IChatRepository,
        assembler: ContextAssembler,
        completion: ICompletionService,
        corpus_limit: int = 50,
        top_k: int = 3,
    ):
        self.document_repo = document_repo
        self.chat_repo = chat_repo
        self.assembler = assembler
        self.completion = completion
        self.corpus_limit = corpus_limit
        self.top_k = top_k

    @staticmethod
    def effective_message(message: Optional[str], attachment: Optional[Attachment]) -> str:
        """
        The text stored as the user message.

        Raises:
            InvalidRequestError: neither message text nor attachment supplied
        """
        if not _is_blank(message):
            return message  # type: ignore[return-value]
        if attachment is None:
            raise InvalidRequestError("message or file required")
        return f"[Attached File: {attachment.filename}]"

    async def _score(self, message: Optional[str]) -> List[ScoredDocument]:
        if _is_blank(message):
            return []
        try:
            corpus = await self.document_repo.find_recent(self.corpus_limit)
        except Exception as e:
            raise PersistenceError(f"Could not load documents: {e}") from e
        return retrieve(message, corpus, self.top_k)  # type: ignore[arg-type]

    async def _persist_user_turn(self, user_message: str, session_id: Optional[str]) -> int:
        try:
            return await self.chat_repo.insert(
                ChatTurn(user_message=user_message, session_id=session_id or None)
            )
        except Exception as e:
            raise PersistenceError(f"Could not store user message: {e}") from e

    async def _persist_assistant_message(self, turn_id: int, text: str) -> None:
        try:
            await self.chat_repo.update(turn_id, text)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Could not store assistant message: {e}") from e

    async def handle(
        self,
        message: Optional[str] = None,
        session_id: Optional[str] = None,
        attachment: Optional[Attachment] = None,
    ) -> ChatResult:
        user_message = self.effective_message(message, attachment)

        scored = await self._score(message)
        turn_id = await self._persist_user_turn(user_message, session_id)
        logger.info(f"Chat turn {turn_id} stored (session={session_id!r}, docs={len(scored)})")

        degraded = False
        try:
            parts = await self.assembler.assemble(scored, user_message, attachment)
            reply = await self.completion.complete(parts)
        except CompletionError as e:
            logger.error(f"Completion failed for chat turn {turn_id}: {e}")
            reply, degraded = FALLBACK_REPLY, True
        except Exception as e:
            logger.exception(f"Chat turn {turn_id} failed before completion: {e}")
            reply, degraded = FALLBACK_REPLY, True

        await self._persist_assistant_message(turn_id, reply)

        return ChatResult(
            reply=reply,
            docs=[DocumentRef(filename=s.document.filename, url=s.document.url) for s in scored],
            degraded=degraded,
            turn_id=turn_id,
        )

    async def history(self, session_id: str, limit: int = 200) -> List[ChatTurn]:
        return await self.chat_repo.find_by_session(session_id, limit)
