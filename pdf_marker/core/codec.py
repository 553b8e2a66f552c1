import base64
import binascii
import logging
from pathlib import Path
from typing import Union

from pdf_marker.core.errors import DecodingError, EncodingError
from pdf_marker.core.types import EncodedDocument

logger = logging.getLogger(__name__)


def encode(binary) -> EncodedDocument:
    """Turn raw document bytes (or a readable binary file) into base64 text.

    Anything that cannot be read as a non-empty byte string raises EncodingError.
    """
    if hasattr(binary, "read"):
        try:
            binary = binary.read()
        except (OSError, ValueError) as e:
            raise EncodingError(f"Could not read document stream: {e}") from e
    if isinstance(binary, (bytearray, memoryview)):
        binary = bytes(binary)
    if not isinstance(binary, bytes):
        raise EncodingError(f"Expected binary document data, got {type(binary).__name__}")
    if not binary:
        raise EncodingError("Document is empty")
    return base64.b64encode(binary).decode("ascii")


def encode_file(path: Union[str, Path]) -> EncodedDocument:
    try:
        with open(path, "rb") as f:
            return encode(f)
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        raise EncodingError(f"Could not read '{path}': {e}") from e


def decode(doc: EncodedDocument) -> bytes:
    if isinstance(doc, str):
        try:
            doc = doc.encode("ascii")
        except UnicodeEncodeError as e:
            raise DecodingError("Encoded document contains non-ASCII characters") from e
    if not isinstance(doc, (bytes, bytearray)):
        raise DecodingError(f"Expected an encoded document, got {type(doc).__name__}")
    try:
        return base64.b64decode(doc, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodingError(f"Malformed encoded document: {e}") from e
