"""Filesystem-safe vessel file names."""

INVALID_FILENAME_CHARACTERS = frozenset('/\\:*?"<>|' + "".join(chr(code) for code in range(32)) + chr(127))
REPLACEMENT_CHARACTER = "_"


def sanitize_filename(name: str) -> str:
    """
    Replace every character that is invalid in file names with ``_``.

    Covers the characters Windows forbids plus ASCII control characters. The
    result is never empty, so an empty name becomes ``_``. Applying the
    function twice gives the same result as applying it once.
    """
    cleaned = "".join(
        REPLACEMENT_CHARACTER if character in INVALID_FILENAME_CHARACTERS else character
        for character in name
    )
    return cleaned or REPLACEMENT_CHARACTER
