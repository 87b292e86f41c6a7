"""Custom exceptions for composition parsing and resolution.

Only structural problems with a whole descriptor are raised. Problems with
individual regions are never raised: they are collected as diagnostics on
the resolved composition so that sibling regions keep resolving.
"""


class CompositionError(Exception):
    """Base exception for all composition-related errors."""

    def __init__(self, message: str, source: str | None = None) -> None:
        """Initialize composition error with optional source context.

        Args:
            message: Human-readable error description.
            source: Where the descriptor came from (file name, element path).
        """
        self.source = source
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with source context if available."""
        if self.source:
            return f"{self.message} (source: {self.source})"
        return self.message


class MissingRootStructureError(CompositionError):
    """Raised when a descriptor lacks the structure resolution depends on.

    This error is raised when:
    - The document is not well-formed
    - The root element or mapping is absent or of the wrong kind
    - The screen container holding the regions is absent

    Resolution aborts and no slices are produced.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        *,
        missing: str | None = None,
    ) -> None:
        """Initialize with the name of the missing structure.

        Args:
            message: Human-readable error description.
            source: Where the descriptor came from.
            missing: Name of the element or key that was expected.
        """
        self.missing = missing
        super().__init__(message, source)

    def _format_message(self) -> str:
        parts = [self.message]
        if self.missing is not None:
            parts.append(f"missing={self.missing}")
        if self.source:
            parts.append(f"source={self.source}")

        if len(parts) == 1:
            return parts[0]
        return f"{parts[0]} ({', '.join(parts[1:])})"
