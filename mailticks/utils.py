"""Utility functions for shaping telemetry payloads.

This module provides the string and URL formatting helpers used when an
outbound request event is built: default port stripping, domain extraction,
exact execution time arithmetic, MIME header parsing and serialization.
"""

import base64
import binascii
import json
import logging
import re
from decimal import ROUND_DOWN, Decimal
from typing import Any
from urllib.parse import urlsplit

from mailticks.models import DetailLevel

logger = logging.getLogger("mailticks")

# Well-known ports that are dropped from SMTP urls
DEFAULT_SMTP_PORTS = {
    "smtp": "25",
    "smtps": "587",
}

# Maximum body length logged at DetailLevel.DETAILED, in bytes
BODY_PREVIEW_LENGTH = 512

EXECUTION_TIME_PRECISION = Decimal("0.0001")


def format_smtp_url(host: str) -> str:
    """Strip the port from an SMTP host string when it is the default one.

    Args:
        host: Host string in the form ``scheme:hostname:port``

    Returns:
        The host without its port if the port is the well-known default for
        the scheme, otherwise the host unchanged

    Example:
        >>> format_smtp_url("smtp://smtp.example.com:25")
        'smtp://smtp.example.com'
        >>> format_smtp_url("smtps://smtp.example.com:465")
        'smtps://smtp.example.com:465'
    """
    parts = host.split(":")
    if len(parts) > 2 and DEFAULT_SMTP_PORTS.get(parts[0]) == parts[2]:
        return f"{parts[0]}:{parts[1]}"
    return host


def url_domain(url: str) -> str:
    """Return the host part of ``url``, or ``url`` itself if it has none."""
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        hostname = None
    return hostname or url


def execution_time(start: float, end: float) -> float:
    """Compute ``end - start`` truncated to four decimal places.

    The subtraction is done on the decimal representation of both
    timestamps so that binary floating point noise does not leak into the
    result.
    """
    delta = Decimal(repr(end)) - Decimal(repr(start))
    return float(delta.quantize(EXECUTION_TIME_PRECISION, rounding=ROUND_DOWN))


def parse_mime_headers(header_block: str) -> dict[str, str]:
    """Parse a raw MIME header block into a mapping.

    Args:
        header_block: Header lines separated by LF or CRLF

    Returns:
        One entry per ``Name: Value`` header. Folded continuation lines are
        joined onto their header first. Blank lines and lines without a
        ``": "`` separator are skipped.
    """
    unfolded: list[str] = []
    for line in re.split(r"\r?\n", header_block):
        if line[:1] in (" ", "\t") and unfolded and unfolded[-1].strip():
            unfolded[-1] += line
        else:
            unfolded.append(line)

    headers: dict[str, str] = {}
    for line in unfolded:
        line = line.strip()
        if not line:
            continue
        name, sep, value = line.partition(": ")
        if not sep:
            logger.debug(f"Skipping malformed header line: {line}")
            continue
        headers[name.strip()] = value.strip()
    return headers


def to_json(data: Any) -> str | None:
    """Serialize ``data`` to compact JSON, or ``None`` if it can't be."""
    try:
        return json.dumps(data, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        logger.debug(f"Unable to serialize telemetry payload: {e}")
        return None


def decode_body(body: str, is_base64: bool) -> bytes:
    """Return the raw bytes of a message body, decoding base64 if needed."""
    if is_base64:
        try:
            return base64.b64decode(body)
        except (binascii.Error, ValueError) as e:
            logger.debug(f"Body is not valid base64, logging it as is: {e}")
    return body.encode("utf-8", errors="replace")


def prepare_log_data(data: bytes, level: DetailLevel) -> str:
    """Prepare a body for logging according to the detail level.

    At ``DetailLevel.DETAILED`` only the first 512 bytes are kept, followed by
    an ellipsis. Every other level keeps the data whole.
    """
    if level == DetailLevel.DETAILED and len(data) > BODY_PREVIEW_LENGTH:
        preview = data[:BODY_PREVIEW_LENGTH]
        return preview.decode("utf-8", errors="replace") + "..."
    return data.decode("utf-8", errors="replace")
