import re

_SEPARATORS = re.compile(r"[\s-]")
_LOCAL_THAI = re.compile(r"^0\d{9}$")


def clean_phone(value: str) -> str:
    return _SEPARATORS.sub("", value or "")


def normalize_thai_phone(value: str) -> str:
    """Convert ``0XXXXXXXXX`` to ``+66XXXXXXXXX``; other numbers are only cleaned."""
    raw = clean_phone(value)
    if raw.startswith("+66"):
        return raw
    if _LOCAL_THAI.fullmatch(raw):
        return f"+66{raw[1:]}"
    return raw
