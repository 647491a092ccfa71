"""
Quotation export — save the PDF, or hand it to a share hook.

Share hooks are platform integrations (mobile share sheet, messaging app).
When none is available, or the hook raises ShareNotSupportedError, the PDF
is saved to disk and a WhatsApp link carrying the message is returned
instead. Nothing here touches the store; it works on a snapshot.
"""

import logging
import os
import urllib.parse
from typing import Callable, Optional

from pydantic import BaseModel

from .config import settings
from .errors import ExportNotReadyError, ShareNotSupportedError
from .pdf_generator import generate_quotation_pdf
from .schemas import Quotation, QuotationSnapshot

logger = logging.getLogger(__name__)

WHATSAPP_URL = "https://wa.me/?text={text}"

# share(filename, pdf_bytes, message) -> None
ShareHook = Callable[[str, bytes, str], None]


class ShareResult(BaseModel):
    method: str                # "share" | "fallback"
    path: Optional[str] = None
    url: Optional[str] = None


def can_export(quotation: Quotation) -> bool:
    """Company, client and at least one material are required."""
    return bool(
        quotation.company.strip()
        and quotation.client.strip()
        and quotation.materials
    )


def export_filename(quotation: Quotation) -> str:
    name = f"Orçamento {quotation.company.strip()} - {quotation.client.strip()}.pdf"
    # Path separators would escape the export directory
    return name.replace("/", "-").replace("\\", "-")


def share_message(quotation: Quotation) -> str:
    return f"Orçamento - {quotation.company}\nCliente: {quotation.client}"


def _check_ready(snapshot: QuotationSnapshot):
    if not can_export(snapshot.quotation):
        raise ExportNotReadyError(
            "Company, client and at least one material are required to export."
        )


def export_pdf(snapshot: QuotationSnapshot, directory: str = None) -> str:
    """Write the quotation PDF into `directory` and return its path."""
    _check_ready(snapshot)
    directory = directory or settings.EXPORT_DIR
    os.makedirs(directory, exist_ok=True)

    path = os.path.join(directory, export_filename(snapshot.quotation))
    with open(path, "wb") as f:
        f.write(generate_quotation_pdf(snapshot))
    logger.info("Exported quotation PDF to %s", path)
    return path


def share_quotation(snapshot: QuotationSnapshot, share: Optional[ShareHook] = None,
                    directory: str = None) -> ShareResult:
    """
    Share the quotation PDF through `share`, falling back to a saved file
    plus a WhatsApp link when sharing is unavailable.
    """
    _check_ready(snapshot)
    quotation = snapshot.quotation
    message = share_message(quotation)

    if share is not None:
        try:
            share(export_filename(quotation), generate_quotation_pdf(snapshot), message)
            return ShareResult(method="share")
        except ShareNotSupportedError as e:
            logger.warning("Share not supported, falling back to file + link: %s", e)
    else:
        logger.warning("No share hook available, falling back to file + link")

    path = export_pdf(snapshot, directory)
    text = f"{message}\n{path}"
    url = WHATSAPP_URL.format(text=urllib.parse.quote(text))
    return ShareResult(method="fallback", path=path, url=url)
