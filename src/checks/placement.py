"""Placement check: top-level heading written before the content region."""
from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from parsers.document_model import DocumentModel

logger = structlog.get_logger(__name__)

HEADING_TAG = "h1"
CONTENT_REGION_TAG = "body"

_REGION_OPEN = re.compile(rf"<{CONTENT_REGION_TAG}[\s>/]", re.IGNORECASE)


def check_placement(document: "DocumentModel") -> bool:
    """
    Return True if the heading begins before the content region.

    Cases, first match wins:
    1. Both offsets known: heading offset < region offset.
    2. Region present with unknown offset while the source contains a
       literal region opening tag: the tag the author wrote is orphaned.
       A page with <html> or <head> but no <body> has an implied region
       and lands here without a defect.
    3. Heading present and no region at all: a bare fragment.
    """
    if not document.exists(CONTENT_REGION_TAG):
        defect = document.exists(HEADING_TAG)
        if defect:
            logger.debug("placement_defect", reason="no_content_region")
        return defect

    heading_offset = document.location(HEADING_TAG)
    region_offset = document.location(CONTENT_REGION_TAG)

    if heading_offset is not None and region_offset is not None:
        defect = heading_offset < region_offset
        if defect:
            logger.debug(
                "placement_defect",
                reason="heading_before_region",
                heading_offset=heading_offset,
                region_offset=region_offset,
            )
        return defect

    if region_offset is None and _REGION_OPEN.search(document.raw_text):
        logger.debug("placement_defect", reason="region_inferred")
        return True

    return False
