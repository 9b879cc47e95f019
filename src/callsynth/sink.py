"""Reading and writing conversation documents as JSON.

The on-disk shape is ``{"conversations": [...]}`` with ISO-8601 UTC
timestamps. Turns without actions carry no ``agentic_action`` key.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from callsynth.errors import InvalidDocumentError
from callsynth.schema.transcript import Document


logger = logging.getLogger(__name__)


def dump_document(document: Document, indent: int | None = 2) -> str:
    """Serialize a document to a JSON string."""
    return json.dumps(document.model_dump(mode="json"), indent=indent)


def write_document(document: Document, path: Path, indent: int | None = 2) -> Path:
    """Write a document to ``path``, creating parent directories.

    Args:
        document: The document to write
        path: Destination file
        indent: JSON indentation, None for compact output

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(dump_document(document, indent=indent))
    logger.debug("Wrote %d conversations to %s", len(document.conversations), path)
    return path


def parse_document(text: str) -> Document:
    """Parse and validate a JSON document.

    Raises:
        InvalidDocumentError: If the text is not JSON or not a valid document
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidDocumentError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict) or "conversations" not in data:
        raise InvalidDocumentError("Document must be an object with a 'conversations' list")

    try:
        return Document.model_validate(data)
    except ValidationError as e:
        raise InvalidDocumentError(f"Invalid document: {e}") from e


def load_document(path: Path) -> Document:
    """Load a document from disk.

    Raises:
        InvalidDocumentError: If the file cannot be read or parsed
    """
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise InvalidDocumentError(f"Cannot read {path}: {e}") from e
    return parse_document(text)
