# Character-set checks from RFC 6749 Appendix A.
# Created: 2026-02-20

from __future__ import annotations

import re

# VSCHAR = %x20-7E
_VSCHAR = re.compile(r"[\x20-\x7e]+")
# NQCHAR = %x21 / %x23-5B / %x5D-7E
_NQCHAR = re.compile(r"[\x21\x23-\x5b\x5d-\x7e]+")
# NQSCHAR = %x20-21 / %x23-5B / %x5D-7E
_NQSCHAR = re.compile(r"[\x20-\x21\x23-\x5b\x5d-\x7e]+")
# NCHAR = "-" / "." / "_" / DIGIT / ALPHA
_NCHAR = re.compile(r"[-._0-9A-Za-z]+")
# Token strings: visible ASCII without space or backslash
_TOKEN_VSCHAR = re.compile(r"[\x21-\x5b\x5d-\x7e]+")


def _matches(pattern: re.Pattern[str], value: object) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def is_vschar(value: object) -> bool:
    return _matches(_VSCHAR, value)


def is_nqchar(value: object) -> bool:
    return _matches(_NQCHAR, value)


def is_nqschar(value: object) -> bool:
    return _matches(_NQSCHAR, value)


def is_nchar(value: object) -> bool:
    return _matches(_NCHAR, value)


def is_token_vschar(value: object) -> bool:
    """Check a token string: one or more visible ASCII chars, no space or backslash."""
    return _matches(_TOKEN_VSCHAR, value)
