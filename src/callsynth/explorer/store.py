"""The explorer's active document.

Loading replaces the active document only when the new one parses and
validates; a rejected document leaves the previous one in place.
"""

import logging
from pathlib import Path

from callsynth.errors import InvalidDocumentError
from callsynth.schema.transcript import Conversation, Document
from callsynth.sink import load_document, parse_document


logger = logging.getLogger(__name__)


class DocumentStore:
    """Holds the document the explorer is currently showing."""

    def __init__(self, document: Document | None = None):
        self.document = document or Document()
        self.source: str | None = None

    @property
    def conversations(self) -> list[Conversation]:
        return self.document.conversations

    def _replace(self, document: Document, source: str) -> Document:
        self.document = document
        self.source = source
        logger.info("Loaded %d conversations from %s", len(document.conversations), source)
        return document

    def load_text(self, text: str, source: str = "<text>") -> Document:
        """Parse ``text`` and make it the active document.

        Raises:
            InvalidDocumentError: If the text is not a valid document; the
                active document is unchanged
        """
        try:
            document = parse_document(text)
        except InvalidDocumentError:
            logger.warning("Rejected invalid document from %s", source)
            raise
        return self._replace(document, source)

    def load_path(self, path: Path) -> Document:
        """Load a document file and make it the active document.

        Raises:
            InvalidDocumentError: If the file is unreadable or invalid; the
                active document is unchanged
        """
        try:
            document = load_document(path)
        except InvalidDocumentError:
            logger.warning("Rejected invalid document from %s", path)
            raise
        return self._replace(document, str(path))
