# services/context_assembler.py
import logging
from typing import List, Optional, Sequence

from config import settings
from core.domain import Attachment, BinaryPart, PromptPart, ScoredDocument, TextPart
from core.interfaces import ITextExtractor
from utils.common import is_image_mime

logger = logging.getLogger(settings.LOGGER_NAME)

SYSTEM_INSTRUCTION = (
    "You are a helpful customer support AI. Use the following company documents "
    "to answer the user request if relevant. If the answer is not in the documents, "
    "answer generally but politely.\n\n"
)

DEFAULT_EXCERPT_CHARS = 1000


class ContextAssembler:
    """
    Builds the ordered prompt parts sent to the completion service.

    Output order: instruction with document excerpts, the user query, then at
    most one attachment part (inline image bytes or extracted text).
    """

    def __init__(self, extractor: ITextExtractor, excerpt_chars: int = DEFAULT_EXCERPT_CHARS):
        self.extractor = extractor
        self.excerpt_chars = excerpt_chars

    def build_system_context(self, scored: Sequence[ScoredDocument]) -> str:
        context = SYSTEM_INSTRUCTION
        for i, item in enumerate(scored, start=1):
            excerpt = (item.document.text or "")[: self.excerpt_chars]
            context += f"Document {i} ({item.document.filename}):\n{excerpt}\n\n"
        return context

    async def attachment_part(self, attachment: Attachment) -> PromptPart:
        if is_image_mime(attachment.mime_type):
            return BinaryPart(mime_type=attachment.mime_type, data=attachment.data)

        result = await self.extractor.extract_result(attachment.data, attachment.filename)
        if result.ok:
            return TextPart(f"\n\n[Attached Document Content]:\n{result.text}\n")

        logger.warning(f"Attachment {attachment.filename} sent without content: {result.error}")
        return TextPart(f"\n\n[Attached File: {attachment.filename} (Could not extract text)]")

    async def assemble(
        self,
        scored: Sequence[ScoredDocument],
        user_message: str,
        attachment: Optional[Attachment] = None,
    ) -> List[PromptPart]:
        parts: List[PromptPart] = [
            TextPart(self.build_system_context(scored)),
            TextPart(f"User Query: {user_message}"),
        ]
        if attachment is not None:
            parts.append(await self.attachment_part(attachment))
        return parts
