"""Inline citation linking.

Rewrites bracketed numeric markers such as [1] or [2, 3] in narrative text
into references to the matching Source. Markers whose label has no source
stay as they are.
"""

from __future__ import annotations

import html
import re
from typing import Callable, Dict, Optional, Sequence

from ..schemas.report import Source

# Only digits, commas and whitespace inside the brackets
_CITATION_RE = re.compile(r"\[\s*(\d+(?:\s*,\s*\d+)*)\s*\]")

Renderer = Callable[[str, Source], str]


def html_anchor(label: str, source: Source) -> str:
    return f'<a href="{html.escape(source.url, quote=True)}" target="_blank">[{label}]</a>'


def markdown_link(label: str, source: Source) -> str:
    return f"[[{label}]]({source.url})"


def linkify(text: str, sources: Sequence[Source], render: Renderer = html_anchor) -> str:
    """
    Replace each cited label with render(label, source).
    Labels are compared as strings; a group [1, 2] is resolved per label
    and rejoined with ", ".
    """
    by_index: Dict[str, Source] = {}
    for source in sources:
        by_index.setdefault(source.index, source)

    def _replace(match: re.Match) -> str:
        labels = [label.strip() for label in match.group(1).split(",")]
        if not any(label in by_index for label in labels):
            return match.group(0)
        parts = []
        for label in labels:
            source = by_index.get(label)
            parts.append(render(label, source) if source is not None else f"[{label}]")
        return ", ".join(parts)

    return _CITATION_RE.sub(_replace, text)


def relabel_citations(
    text: str,
    mapping: Dict[str, str],
    orphan: Optional[Callable[[str], str]] = None,
) -> str:
    """
    Rename cited labels (old -> new) in one pass.

    Unmapped labels are kept as they are, unless `orphan` is given: then
    each unmapped label is rewritten to the marker orphan(label) returns,
    and a group holding one is split into separate bracketed markers.
    """
    if not mapping and orphan is None:
        return text

    def _replace(match: re.Match) -> str:
        labels = [label.strip() for label in match.group(1).split(",")]
        if orphan is not None and any(label not in mapping for label in labels):
            return ", ".join(
                f"[{mapping[label]}]" if label in mapping else orphan(label)
                for label in labels
            )
        if all(mapping.get(label, label) == label for label in labels):
            return match.group(0)
        return "[" + ", ".join(mapping.get(label, label) for label in labels) + "]"

    return _CITATION_RE.sub(_replace, text)
