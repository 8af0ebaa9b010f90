"""
Exception classes for dashboard core.

Public operations never raise for runtime failures (they return False, None
or an error text instead). These exceptions are used at internal seams:
settings validation and the CLI argument checks.
"""


class InvalidIdentifierError(ValueError):
    """
    Raised when a container id or service name fails the identifier check.

    Attributes:
        kind: What the value was supposed to be (e.g. "container ID")
        value: The rejected value
    """

    def __init__(self, kind: str, value: object) -> None:
        self.kind = kind
        self.value = value
        super().__init__(
            f"Invalid {kind}: {value!r}. "
            f"Only letters, digits, '_', '-' and '.' are allowed (1-255 chars)."
        )
