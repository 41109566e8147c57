"""Tests for prompt assembly."""

from core.domain import Attachment, BinaryPart, ScoredDocument, TextPart
from services.context_assembler import SYSTEM_INSTRUCTION, ContextAssembler


async def test_documents_are_labelled_in_rank_order(extractor, document_factory):
    assembler = ContextAssembler(extractor)
    scored = [
        ScoredDocument(document_factory("faq.txt", "Refund policy"), 3),
        ScoredDocument(document_factory("terms.txt", "Refund terms"), 1),
    ]

    parts = await assembler.assemble(scored, "refund")

    assert len(parts) == 2
    context = parts[0].text
    assert context.startswith(SYSTEM_INSTRUCTION)
    assert "Document 1 (faq.txt):\nRefund policy\n\n" in context
    assert "Document 2 (terms.txt):\nRefund terms\n\n" in context
    assert context.index("Document 1") < context.index("Document 2")
    assert parts[1] == TextPart("User Query: refund")


async def test_document_excerpt_is_capped(extractor, document_factory):
    assembler = ContextAssembler(extractor)
    doc = document_factory("long.txt", "a" * 1500 + "TAIL")

    parts = await assembler.assemble([ScoredDocument(doc, 1)], "a")

    assert "a" * 1000 + "\n\n" in parts[0].text
    assert "a" * 1001 not in parts[0].text
    assert "TAIL" not in parts[0].text


async def test_image_attachment_becomes_binary_part(extractor):
    assembler = ContextAssembler(extractor)
    image = Attachment(filename="screen.png", mime_type="image/png", data=b"\x89PNGdata")

    parts = await assembler.assemble([], "[Attached File: screen.png]", image)

    assert parts[0] == TextPart(SYSTEM_INSTRUCTION)
    assert "Document 1" not in parts[0].text
    assert parts[-1] == BinaryPart(mime_type="image/png", data=b"\x89PNGdata")
    assert extractor.calls == []


async def test_extracted_attachment_text_is_appended(extractor):
    extractor.text = "Order #123 was damaged."
    assembler = ContextAssembler(extractor)
    attachment = Attachment(filename="complaint.pdf", mime_type="application/pdf", data=b"%PDF")

    parts = await assembler.assemble([], "see file", attachment)

    assert parts[-1] == TextPart("\n\n[Attached Document Content]:\nOrder #123 was damaged.\n")
    assert extractor.calls == ["complaint.pdf"]


async def test_failed_extraction_adds_placeholder(extractor):
    assembler = ContextAssembler(extractor)
    attachment = Attachment(
        filename="broken.docx",
        mime_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        data=b"not a docx",
    )

    parts = await assembler.assemble([], "[Attached File: broken.docx]", attachment)

    last = parts[-1]
    assert isinstance(last, TextPart)
    assert last.text == "\n\n[Attached File: broken.docx (Could not extract text)]"
    assert "[Attached Document Content]" not in last.text
    assert len(extractor.calls) == 1
