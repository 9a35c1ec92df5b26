from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Dict, Optional, Union

from qzh_preview.config import ConfigManager
from qzh_preview.core.exceptions import ParseError, TransformError
from qzh_preview.core.loader import parse
from qzh_preview.core.models import TransformResult
from qzh_preview.core.transformer import TeiTransformer

logger = logging.getLogger(__name__)

__all__ = ["PreviewResult", "PreviewService"]

_ERROR_PREFIX = "Fehler beim Verarbeiten der XML-Datei: "


@dataclass
class PreviewResult:
    """Structured result for preview operations.

    Attributes
    ----------
    success : bool
        Indicates whether the document was parsed and transformed.
    content : Optional[TransformResult]
        The transform result when successful, None on failure. Failures never
        carry a partial result.
    message : str
        User-facing message (German). Empty on success.
    details : Optional[Dict[str, Any]]
        Structured ancillary data (error reason, parser position, exception
        type).
    """
    success: bool
    content: Optional[TransformResult]
    message: str
    details: Optional[Dict[str, Any]] = None


class PreviewService:
    """Service wrapper chaining XML loading and the TEI transform.

    The methods follow a non-raising pattern: malformed input and unexpected
    failures are returned as a ``PreviewResult`` with ``success=False`` and a
    clear message, so the caller can show it and keep its current state.

    Notes
    -----
    - No file I/O is performed; the caller passes the complete document.
    - The transformer is built once from :class:`ConfigManager` settings and
      is shared by all calls; each call still gets its own transform context.

    Examples
    --------
    >>> service = PreviewService()
    >>> result = service.render_document(xml_text)
    >>> if result.success:
    ...     html = result.content.body
    ... else:
    ...     print(result.message)
    """

    def __init__(self, transformer: Optional[TeiTransformer] = None,
                 default_normalized: Optional[bool] = None) -> None:
        config = None
        if transformer is None or default_normalized is None:
            config = ConfigManager()
        if transformer is None:
            transformer = TeiTransformer(rendition_synonyms=config.get_rendition_map())
        if default_normalized is None:
            default_normalized = bool(config.get_preview_config().get("normalized", False))
        self.transformer = transformer
        self.default_normalized = default_normalized

    # -----------------------------
    # Public API
    # -----------------------------

    def render_document(self, raw_text: Union[str, bytes],
                        normalized: Optional[bool] = None) -> PreviewResult:
        """Parse and transform a complete TEI document.

        Parameters
        ----------
        raw_text : str | bytes
            The whole XML document.
        normalized : Optional[bool]
            Rendering mode; the configured default when None.

        Returns
        -------
        PreviewResult
            On success, ``content`` holds the :class:`TransformResult`.
        """
        mode = self.default_normalized if normalized is None else normalized
        logger.debug("Preview: render_document normalized=%s", mode)

        try:
            tree = parse(raw_text)
            result = self.transformer.transform(tree, normalized=mode)
        except ParseError as exc:
            logger.info("Preview FAIL: parse_error msg=%s", exc)
            return PreviewResult(
                success=False,
                content=None,
                message=_ERROR_PREFIX + str(exc),
                details={
                    "reason": "parse_error",
                    "line": exc.line,
                    "column": exc.column,
                },
            )
        except TransformError as exc:
            logger.error("Preview FAIL: transform_error msg=%s", exc)
            return PreviewResult(
                success=False,
                content=None,
                message=_ERROR_PREFIX + str(exc),
                details={
                    "reason": "transform_error",
                    "exception_type": exc.cause.__class__.__name__ if exc.cause else None,
                },
            )
        except Exception as exc:  # noqa: BLE001 - intentionally broad for service boundary
            logger.error("Preview FAIL: exception type=%s msg=%s", exc.__class__.__name__, str(exc), exc_info=True)
            return PreviewResult(
                success=False,
                content=None,
                message=_ERROR_PREFIX + str(exc),
                details={
                    "reason": "exception",
                    "exception_type": exc.__class__.__name__,
                    "exception_message": str(exc),
                },
            )

        logger.info(
            "Preview OK: footnotes=%d body=%s back=%s",
            len(result.footnotes), result.body is not None, result.back is not None,
        )
        return PreviewResult(success=True, content=result, message="", details=None)
