from __future__ import annotations

"""XML loading for TEI documents.

Well-formedness is the only check: no schema or DTD validation is done.
Entities declared in the internal DTD subset are expanded; external entities
are never resolved or fetched.
"""

import logging
from typing import Union

from lxml import etree as ET

from qzh_preview.core.exceptions import ParseError

__all__ = ["parse"]

logger = logging.getLogger(__name__)


def _make_parser(encoding=None) -> ET.XMLParser:
    return ET.XMLParser(
        encoding=encoding,
        resolve_entities="internal",
        no_network=True,
        load_dtd=False,
        remove_blank_text=False,
        huge_tree=False,
    )


def parse(raw_text: Union[str, bytes]) -> ET._Element:
    """Parse *raw_text* into an lxml element tree and return its root.

    ``str`` input is treated as already-decoded text, so an encoding named in
    the XML declaration is ignored; ``bytes`` input is decoded according to
    the declaration.

    Raises
    ------
    ParseError
        If the input is empty or not well-formed XML. The exception carries
        the parser's diagnostic and, when known, the line and column.
    """
    if raw_text is None or not raw_text.strip():
        raise ParseError("Document is empty")

    if isinstance(raw_text, str):
        data = raw_text.encode("utf-8")
        parser = _make_parser("utf-8")
    else:
        data = raw_text
        parser = _make_parser()

    try:
        root = ET.fromstring(data, parser)
    except ET.XMLSyntaxError as exc:
        line, column = exc.position if exc.position else (None, None)
        logger.debug("Load FAIL: %s", exc)
        raise ParseError(exc.msg or str(exc), line=line, column=column, cause=exc) from exc

    if root is None:
        raise ParseError("Document is empty")

    logger.debug("Load OK: root=%s bytes=%d", root.tag, len(data))
    return root
