"""
SecureLog Masking

Turns a detected secret into a partially visible disguise such as
``sk_li*****``. The output length does not follow the input length.
"""

from __future__ import annotations

from securelog.core.errors import InvalidInputError

DEFAULT_VISIBLE_CHARS = 5
MASK_WIDTH = 10
MASK_CHAR = "*"


def mask_string(value: str, visible_chars: int = DEFAULT_VISIBLE_CHARS) -> str:
    """
    Mask a secret, keeping only its first ``visible_chars`` characters.

    Values shorter than 10 characters get one ``*`` per character; longer
    values are cut down to a 10 character wide result.

    Args:
        value: The secret to mask. Must be a non-empty string.
        visible_chars: Number of leading characters left readable.

    Returns:
        The masked string, or ``value`` unchanged when ``visible_chars``
        covers the whole value.

    Raises:
        InvalidInputError: ``value`` is empty or not a string, or
            ``visible_chars`` is negative.
    """
    if not isinstance(value, str) or not value:
        raise InvalidInputError("Invalid input: value must be a non-empty string.")
    if visible_chars < 0:
        raise InvalidInputError("Invalid parameter: visible_chars must be a non-negative number.")

    if visible_chars >= len(value):
        return value

    masked_len = len(value) if len(value) < MASK_WIDTH else MASK_WIDTH - visible_chars
    return value[:visible_chars] + MASK_CHAR * masked_len
