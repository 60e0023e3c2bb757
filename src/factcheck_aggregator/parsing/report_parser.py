"""Parser for the four-section free-text report returned by backends.

Expected layout (sections separated by blank lines, in any order):

    Sources:
    1. [title](url)
    2. [title](url)

    Truth: 80%

    Fact Check: narrative with [1] markers

    Context: narrative with [2] markers

Paragraphs without a label continue the narrative section that started last.
Parsing never raises; anything missing falls back to the sentinels in
schemas.report.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from ..log import get_logger
from ..schemas.report import (
    FactCheckReport,
    Source,
    NO_CONTEXT,
    NO_FACT_CHECK,
    NO_URL,
    TRUTH_UNAVAILABLE,
)

logger = get_logger("parser")

SOURCES = "sources"
TRUTH = "truth"
FACT_CHECK = "fact_check"
CONTEXT = "context"

# Literal labels of the report convention
SECTION_LABELS = {
    "Sources:": SOURCES,
    "Truth:": TRUTH,
    "Fact Check:": FACT_CHECK,
    "Context:": CONTEXT,
}
NARRATIVE_SECTIONS = (FACT_CHECK, CONTEXT)

_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n\s*")
_SOURCE_LINE_RE = re.compile(r"^\s*(\d+)\.\s+(.+?)\s*$")
_MD_LINK_RE = re.compile(r"\[(.+?)\]\((.+?)\)")


def split_blocks(raw_text: str) -> List[str]:
    """Split on blank-line boundaries, dropping empty blocks."""
    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    return [b.strip() for b in _BLANK_LINE_RE.split(text) if b.strip()]


def match_label(block: str) -> Optional[str]:
    for label, section in SECTION_LABELS.items():
        if block.startswith(label):
            return section
    return None


def parse_source_line(line: str) -> Optional[Source]:
    match = _SOURCE_LINE_RE.match(line)
    if not match:
        return None
    index, content = match.groups()
    link = _MD_LINK_RE.search(content)
    if link:
        return Source(index=index, title=link.group(1), url=link.group(2).strip())
    return Source(index=index, title=content, url=NO_URL)


def parse_sources(block: str) -> List[Source]:
    # The first line carries the label; entries start on the next line
    sources = []
    for line in block.split("\n")[1:]:
        source = parse_source_line(line)
        if source is not None:
            sources.append(source)
    return sources


def _after_first_colon(block: str) -> str:
    return block.partition(":")[2].strip()


def parse_report(raw_text: Optional[str]) -> FactCheckReport:
    """
    Convert one backend's raw text into a FactCheckReport.
    Unlabelled blocks are space-joined onto the active narrative section;
    blocks before any label, or while Sources/Truth is active, are dropped.
    """
    if not raw_text or not raw_text.strip():
        return FactCheckReport()

    fields: Dict[str, object] = {}
    current: Optional[str] = None

    for block in split_blocks(raw_text):
        section = match_label(block)
        if section is not None:
            if section in fields:
                logger.debug(f"Section {section!r} repeated; last occurrence wins")
            current = section
            if section == SOURCES:
                fields[SOURCES] = parse_sources(block)
            else:
                fields[section] = _after_first_colon(block)
        elif current in NARRATIVE_SECTIONS:
            fields[current] = f"{fields[current]} {block}".strip()
        else:
            logger.debug(f"Dropping unlabelled block outside a narrative section: {block[:40]!r}")

    return FactCheckReport(
        # An empty Truth: line carries no score
        truth_percentage=fields.get(TRUTH) or TRUTH_UNAVAILABLE,
        fact_check=fields.get(FACT_CHECK, NO_FACT_CHECK),
        context=fields.get(CONTEXT, NO_CONTEXT),
        sources=fields.get(SOURCES, []),
    )
