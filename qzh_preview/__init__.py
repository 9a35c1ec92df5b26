"""Top-level package of the QZH TEI preview.

Converts TEI-XML transcriptions into annotated HTML fragments together with
footnotes and entity registers. Front-ends should only depend on the public
API exposed here rather than importing internal modules directly.
"""

from .core.exceptions import ParseError, QzhPreviewError, TransformError
from .core.loader import parse
from .core.models import TransformResult
from .core.services import PreviewResult, PreviewService
from .core.transformer import TeiTransformer

__all__: list[str] = [
    "parse",
    "TeiTransformer",
    "TransformResult",
    "PreviewService",
    "PreviewResult",
    "ParseError",
    "TransformError",
    "QzhPreviewError",
]

__version__ = "0.1.0"
