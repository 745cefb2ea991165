from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Literal
from zipfile import BadZipFile, ZipFile

from pypdf import PdfReader
from pypdf.errors import DependencyError, FileNotDecryptedError, PdfReadError

logger = logging.getLogger(__name__)

MAX_DOCUMENT_BYTES = 10 * 1024 * 1024
MAX_PDF_PAGES = 50

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")

ExtractionReason = Literal["oversized", "empty", "encrypted", "corrupt", "no_text", "unsupported"]
SourceType = Literal["pdf", "docx", "txt"]

_MESSAGES: dict[str, str] = {
    "oversized": "File size exceeds the {limit_mb} MB limit. Please upload a smaller file.",
    "empty": "The file appears to be empty or corrupted.",
    "encrypted": "This PDF is password-protected. Please remove the password and try again.",
    "corrupt": "Invalid {kind} file. Please ensure the file is not corrupted.",
    "no_text": "Could not extract text from the file. It might be image-based or password-protected.",
    "unsupported": "Unsupported file type '{ext}'. Supported types: .pdf, .docx, .txt",
}


class DocumentExtractionError(ValueError):
    def __init__(self, reason: ExtractionReason, message: str | None = None):
        self.reason = reason
        super().__init__(message or _MESSAGES[reason])

    @property
    def status_code(self) -> int:
        return 413 if self.reason == "oversized" else 400


@dataclass
class ExtractedDocument:
    source_type: SourceType
    text: str
    warnings: list[str] = field(default_factory=list)


def _check_size(content: bytes, max_bytes: int) -> None:
    if len(content) > max_bytes:
        raise DocumentExtractionError(
            "oversized",
            _MESSAGES["oversized"].format(limit_mb=max_bytes // (1024 * 1024)),
        )
    if not content:
        raise DocumentExtractionError("empty")


def _open_pdf(content: bytes) -> PdfReader:
    if not content.startswith(PDF_MAGIC):
        raise DocumentExtractionError("corrupt", _MESSAGES["corrupt"].format(kind="PDF"))
    try:
        reader = PdfReader(BytesIO(content))
    except (PdfReadError, ValueError, KeyError) as exc:
        raise DocumentExtractionError("corrupt", _MESSAGES["corrupt"].format(kind="PDF")) from exc

    if reader.is_encrypted:
        # Owner-password-only files open with an empty user password.
        try:
            if not reader.decrypt(""):
                raise DocumentExtractionError("encrypted")
        except (FileNotDecryptedError, DependencyError, NotImplementedError) as exc:
            raise DocumentExtractionError("encrypted") from exc
    return reader


def _pdf_text(content: bytes, max_pages: int, warnings: list[str]) -> str:
    reader = _open_pdf(content)
    try:
        page_count = len(reader.pages)
    except (PdfReadError, FileNotDecryptedError) as exc:
        raise DocumentExtractionError("corrupt", _MESSAGES["corrupt"].format(kind="PDF")) from exc
    if page_count == 0:
        raise DocumentExtractionError("empty")
    if page_count > max_pages:
        warnings.append(f"Only the first {max_pages} of {page_count} pages were read.")

    chunks: list[str] = []
    for index in range(min(page_count, max_pages)):
        try:
            page_text = (reader.pages[index].extract_text() or "").strip()
        except Exception as exc:  # noqa: BLE001
            logger.warning("pdf_page_extract_failed page=%s: %s", index + 1, exc)
            warnings.append(f"Page {index + 1} could not be read.")
            continue
        if page_text:
            chunks.append(page_text)
    return "\n\n".join(chunks).strip()


def extract_text_from_pdf(content: bytes, max_pages: int = MAX_PDF_PAGES, *, max_bytes: int = MAX_DOCUMENT_BYTES) -> str:
    """Return the plain text of a PDF or raise ``DocumentExtractionError``."""
    _check_size(content, max_bytes)
    text = _pdf_text(content, max_pages, [])
    if not text:
        raise DocumentExtractionError("no_text")
    return text


def _docx_text(content: bytes) -> str:
    from docx import Document
    from docx.opc.exceptions import PackageNotFoundError

    if not any(content.startswith(magic) for magic in ZIP_MAGICS):
        raise DocumentExtractionError("corrupt", _MESSAGES["corrupt"].format(kind="DOCX"))
    try:
        with ZipFile(BytesIO(content)) as archive:
            if not any(name.startswith("word/") for name in archive.namelist()):
                raise DocumentExtractionError("corrupt", _MESSAGES["corrupt"].format(kind="DOCX"))
        document = Document(BytesIO(content))
    except (BadZipFile, PackageNotFoundError, KeyError) as exc:
        raise DocumentExtractionError("corrupt", _MESSAGES["corrupt"].format(kind="DOCX")) from exc

    lines = [paragraph.text.strip() for paragraph in document.paragraphs if paragraph.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))
    return "\n".join(lines).strip()


def _plain_text(content: bytes) -> str:
    if content.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        try:
            return content.decode("utf-16").strip()
        except UnicodeDecodeError as exc:
            raise DocumentExtractionError("corrupt", _MESSAGES["corrupt"].format(kind="text")) from exc
    if b"\x00" in content[:4096]:
        raise DocumentExtractionError("corrupt", _MESSAGES["corrupt"].format(kind="text"))
    for encoding in ("utf-8-sig", "latin-1"):
        try:
            return content.decode(encoding).strip()
        except UnicodeDecodeError:
            continue
    raise DocumentExtractionError("corrupt", _MESSAGES["corrupt"].format(kind="text"))


def extract_document_text(
    filename: str,
    content: bytes,
    *,
    max_bytes: int = MAX_DOCUMENT_BYTES,
    max_pages: int = MAX_PDF_PAGES,
) -> ExtractedDocument:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext not in {"pdf", "docx", "txt"}:
        raise DocumentExtractionError("unsupported", _MESSAGES["unsupported"].format(ext=f".{ext}" if ext else filename))
    _check_size(content, max_bytes)

    warnings: list[str] = []
    if ext == "pdf":
        text = _pdf_text(content, max_pages, warnings)
        source_type: SourceType = "pdf"
    elif ext == "docx":
        text = _docx_text(content)
        source_type = "docx"
    else:
        text = _plain_text(content)
        source_type = "txt"

    if not text:
        raise DocumentExtractionError("no_text")
    logger.info("document_extracted type=%s bytes=%s chars=%s", source_type, len(content), len(text))
    return ExtractedDocument(source_type=source_type, text=text, warnings=warnings)
