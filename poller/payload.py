"""
Feed payload parsing

The alerts endpoint answers every poll with one of:
- an empty body, or only whitespace / line breaks (no active alert)
- the literal text ``null`` (no active alert)
- a JSON object ``{"id", "cat", "title", "data", "desc"}``

Bodies frequently carry a UTF-8 byte-order mark. Anything that does not
decode to an alert with an identifier is "no alert"; malformed bodies are
logged and dropped, never raised.
"""

import logging
from typing import Optional, Union

from pydantic import ValidationError

from oref_core.alerts import AlertPayload

logger = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"
EMPTY_SENTINEL = "null"


def normalize_body(raw: Union[bytes, str, None]) -> str:
    """Strip a leading byte-order mark and surrounding whitespace.

    Raises:
        UnicodeDecodeError: ``raw`` is bytes that are not valid UTF-8.
    """
    if not raw:
        return ""

    if isinstance(raw, bytes):
        if raw.startswith(UTF8_BOM):
            raw = raw[len(UTF8_BOM):]
        text = raw.decode("utf-8")
    else:
        text = raw

    if text.startswith("\ufeff"):
        text = text[1:]
    return text.strip()


def parse_payload(raw: Union[bytes, str, None]) -> Optional[AlertPayload]:
    """Decode a feed body into an ``AlertPayload``, or None for "no alert"."""
    try:
        body = normalize_body(raw)
    except UnicodeDecodeError as exc:
        logger.warning("Discarding feed body that is not valid UTF-8: %s", exc)
        return None

    if not body or body == EMPTY_SENTINEL:
        return None

    try:
        payload = AlertPayload.model_validate_json(body)
    except ValidationError as exc:
        logger.warning(
            "Discarding malformed feed payload (%d error(s)): %s",
            exc.error_count(),
            body[:200],
        )
        return None

    if payload.is_empty:
        logger.debug("Feed payload has no identifier; treating as no alert")
        return None

    return payload
