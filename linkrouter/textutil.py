"""Small text helpers used when presenting URLs and names."""

ELLIPSIS = "…"


def ellipsize(text: str, max_length: int) -> str:
    """Shorten ``text`` to at most ``max_length`` characters, ending in an ellipsis."""
    if len(text) <= max_length:
        return text
    if max_length < 1:
        raise ValueError("max_length must be at least 1 to shorten text")
    return text[: max_length - 1] + ELLIPSIS