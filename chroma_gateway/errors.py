"""
Error taxonomy for the gateway and translation of ChromaDB client failures.

Every route raises one of the GatewayError subclasses; the handlers registered
in main.py turn them into JSON responses.
"""

import logging
import re
from contextlib import contextmanager
from typing import Any, Optional

from chromadb.errors import NotFoundError

STORE_NOT_FOUND = "not_found"
STORE_UNKNOWN_EMBEDDING_FUNCTION = "unknown_embedding_function"
STORE_INTERNAL = "internal"

_NOT_FOUND_MARKERS = ("not found", "does not exist")
# Raised when the embedding function stored with a collection is not registered locally
_EMBEDDING_FUNCTION_MISSING = re.compile(r"embedding function \S+ not found")


class GatewayError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidRequest(GatewayError):
    status_code = 400


class Unauthorized(GatewayError):
    status_code = 401


class NotFound(GatewayError):
    status_code = 404


class InternalError(GatewayError):
    status_code = 500


def classify_store_error(exc: BaseException) -> str:
    """
    Map a ChromaDB client exception to one of the STORE_* kinds.

    The HTTP client only exposes NotFoundError as a typed error; everything else
    is recognised from the message text.
    """
    if isinstance(exc, NotFoundError):
        return STORE_NOT_FOUND

    text = str(exc).lower()
    if _EMBEDDING_FUNCTION_MISSING.search(text) or "unsupported embedding function" in text:
        return STORE_UNKNOWN_EMBEDDING_FUNCTION
    if any(marker in text for marker in _NOT_FOUND_MARKERS):
        return STORE_NOT_FOUND
    return STORE_INTERNAL


def is_not_found(exc: BaseException) -> bool:
    return classify_store_error(exc) == STORE_NOT_FOUND


@contextmanager
def store_errors(failure_message: str, not_found_message: Optional[str] = None):
    """Re-raise store failures inside the block as NotFound or InternalError."""
    try:
        yield
    except GatewayError:
        raise
    except Exception as e:
        if is_not_found(e):
            raise NotFound(not_found_message or str(e)) from e
        logging.error(f"[Store] {failure_message}: {e}", exc_info=True)
        raise InternalError(failure_message, details=str(e)) from e
