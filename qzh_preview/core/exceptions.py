from __future__ import annotations

"""Exception classes raised by the QZH preview core.

Only two failure kinds ever reach a caller: malformed input (``ParseError``)
and unexpected failures inside the transform (``TransformError``). Both are
caught at the service boundary and turned into structured results.
"""

from typing import Optional

__all__ = ["QzhPreviewError", "ParseError", "TransformError"]


class QzhPreviewError(Exception):
    """Base exception for all preview-related errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ParseError(QzhPreviewError):
    """Raised when the input document is not well-formed XML.

    ``message`` carries the diagnostic reported by the XML parser; ``line``
    and ``column`` are set when the parser reports a position.
    """

    def __init__(self, message: str, line: Optional[int] = None,
                 column: Optional[int] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, cause)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is not None:
            return f"{self.message} (line {self.line}, column {self.column or 0})"
        return self.message


class TransformError(QzhPreviewError):
    """Raised when the TEI-to-HTML transform fails unexpectedly.

    The transform is total over well-formed input, so this signals a bug
    rather than bad data. The original exception is kept in ``cause``.
    """
    pass
