from __future__ import annotations

"""High-level orchestration services.

Front-ends should call :class:`PreviewService` rather than chaining the
loader and transformer themselves.
"""

from .preview_service import PreviewResult, PreviewService  # noqa: F401

__all__: list[str] = [
    "PreviewResult",
    "PreviewService",
]
