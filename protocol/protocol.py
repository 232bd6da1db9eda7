import math
import logging

ENCODING = "utf-8"


class PayloadFormatError(ValueError):
    """Raised when a message payload is not a valid decimal representation."""


def encode_price(value):
    """Encode a double as its decimal text, the JSON form of a number."""
    return repr(float(value)).encode(ENCODING)


def decode_payload(body):
    """Decode a raw message body into the decimal string it carries."""
    if isinstance(body, str):
        return body.strip()
    try:
        return bytes(body).decode(ENCODING).strip()
    except UnicodeDecodeError as e:
        raise PayloadFormatError(f"Payload is not valid {ENCODING} text: {e}") from e


def parse_decimal(text):
    """Parse a base-10 floating point number.

    Only finite ASCII decimals are accepted: ``float`` would happily take
    ``"nan"``, ``"inf"``, digit separators like ``"1_000"`` or non-ASCII digits,
    none of which are decimal representations.
    """
    if isinstance(text, str) and ("_" in text or not text.isascii()):
        raise PayloadFormatError(f"Payload {text!r} is not a valid decimal number")

    try:
        value = float(text)
    except (TypeError, ValueError) as e:
        raise PayloadFormatError(f"Payload {text!r} is not a valid decimal number") from e

    if not math.isfinite(value):
        raise PayloadFormatError(f"Payload {text!r} is not a finite decimal number")

    logging.debug(f"Parsed payload {text!r} as {value}")
    return value
