"""Merge per-backend reports into one.

Sources are deduplicated on the exact URL string, truth percentages are
averaged, and narratives are kept per backend under a "<name>:" label.
"""

from __future__ import annotations

import math
from functools import partial
from typing import Dict, List, Optional, Sequence

from ..errors import ReconcileOnEmptyInput
from ..log import get_logger
from ..rendering.citations import relabel_citations
from ..schemas.report import FactCheckReport, Source, TRUTH_UNAVAILABLE, parse_percentage

logger = get_logger("reconcile")


def merge_truth(reports: Sequence[FactCheckReport]) -> str:
    parsed = [(r, parse_percentage(r.truth_percentage)) for r in reports]
    valid = [(r, n) for r, n in parsed if n is not None]
    if not valid:
        return TRUTH_UNAVAILABLE
    if len(valid) == 1:
        return valid[0][0].truth_percentage
    mean = sum(n for _, n in valid) / len(valid)
    # Half-up, not banker's rounding
    return f"{math.floor(mean + 0.5)}%"


def _next_label(used: set, start: int) -> int:
    label = start
    while str(label) in used:
        label += 1
    return label


def merge_sources(reports: Sequence[FactCheckReport]) -> tuple:
    """
    Returns (merged sources, per-report label mapping).

    mapping[i] maps every label reports[i] defines to its label in the
    merged list, so narrative citations can be rewritten. The first report
    keeps its labels, except for repeated URLs, which collapse onto their
    first occurrence like in any other report.
    """
    merged: List[Source] = []
    by_url: Dict[str, str] = {}
    used: set = set()
    mappings: List[Dict[str, str]] = []

    for position, report in enumerate(reports):
        mapping: Dict[str, str] = {}
        for source in report.sources:
            if source.has_url and source.url in by_url:
                mapping.setdefault(source.index, by_url[source.url])
                continue
            if position == 0 and source.index not in used:
                label = source.index
            else:
                label = str(_next_label(used, len(merged) + 1))
            used.add(label)
            if label == source.index:
                merged.append(source)
            else:
                merged.append(Source(index=label, title=source.title, url=source.url))
            if source.has_url:
                by_url[source.url] = label
            mapping.setdefault(source.index, label)
        mappings.append(mapping)

    return merged, mappings


def _orphan_marker(name: str, label: str) -> str:
    return f"[{name} {label}]"


def _labelled(sections: Sequence[tuple]) -> str:
    return "\n\n".join(f"{name}: {text}" for name, text in sections)


def reconcile(
    reports: Sequence[FactCheckReport],
    backend_names: Optional[Sequence[str]] = None,
) -> FactCheckReport:
    """
    Merge 1..N successful reports.

    A single report is returned as is. Inputs are never modified; the merged
    report is a new instance.
    """
    if not reports:
        raise ReconcileOnEmptyInput()
    if len(reports) == 1:
        return reports[0]

    names = list(backend_names or [])
    names += [f"Backend {i + 1}" for i in range(len(names), len(reports))]

    sources, mappings = merge_sources(reports)
    fact_checks = []
    contexts = []
    for name, report, mapping in zip(names, reports, mappings):
        # A label the report never defined must not resolve to another backend's source
        orphan = partial(_orphan_marker, name)
        fact_checks.append((name, relabel_citations(report.fact_check, mapping, orphan)))
        contexts.append((name, relabel_citations(report.context, mapping, orphan)))

    merged = FactCheckReport(
        truth_percentage=merge_truth(reports),
        fact_check=_labelled(fact_checks),
        context=_labelled(contexts),
        sources=sources,
    )
    logger.info(
        f"Reconciled {len(reports)} reports: {sum(len(r.sources) for r in reports)} sources -> {len(sources)}, "
        f"truth {merged.truth_percentage}"
    )
    return merged
