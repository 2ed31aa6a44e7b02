"""PDF text extraction via pypdf."""

import io

import pypdf
from pypdf.errors import PdfReadError

from ..exceptions import ValidationError

PDF_MAGIC = b"%PDF"


def looks_like_pdf(data: bytes) -> bool:
    # Some writers put a few junk bytes before the header.
    return PDF_MAGIC in data[:1024]


def extract_text(data: bytes) -> str:
    """Concatenate the text of every page, skipping pages without text.

    Raises:
        ValidationError: the bytes are not a readable PDF.
    """
    if not looks_like_pdf(data):
        raise ValidationError("File is not a PDF", field="file")
    try:
        reader = pypdf.PdfReader(io.BytesIO(data))
        parts: list[str] = []
        for page in reader.pages:
            page_text = (page.extract_text() or "").strip()
            if page_text:
                parts.append(page_text)
    except (PdfReadError, ValueError, KeyError) as e:
        raise ValidationError(f"Could not read PDF: {e}", field="file") from e
    return "\n\n".join(parts)
