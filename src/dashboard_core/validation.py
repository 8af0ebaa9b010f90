"""
Identifier validation for external commands.

Every container id and service name that reaches the docker CLI, nsenter or
systemctl passes through is_valid_identifier first. Commands are always
built as argument lists (never through a shell with caller input), so this
character class is the only injection defense. It admits no path
separators, whitespace, quotes or shell metacharacters.
"""

import re

from dashboard_core.exceptions import InvalidIdentifierError

IDENTIFIER_PATTERN = r"^[A-Za-z0-9_.-]{1,255}$"

_IDENTIFIER_RE = re.compile(IDENTIFIER_PATTERN)


def is_valid_identifier(value: object) -> bool:
    """
    Check whether a value is a safe container id or service name.

    Args:
        value: Candidate identifier (non-strings are rejected)

    Returns:
        True if value is 1-255 chars of letters, digits, '_', '-' or '.'
    """
    if not isinstance(value, str):
        return False
    # fullmatch so a trailing newline cannot slip past '$'
    return _IDENTIFIER_RE.fullmatch(value) is not None


def validate_identifier(value: object, kind: str = "identifier") -> str:
    """
    Return value unchanged if it is a valid identifier.

    Args:
        value: Candidate identifier
        kind: Label used in the error message (e.g. "container ID")

    Returns:
        The validated identifier

    Raises:
        InvalidIdentifierError: If value fails is_valid_identifier
    """
    if not is_valid_identifier(value):
        raise InvalidIdentifierError(kind, value)
    return value  # type: ignore[return-value]
