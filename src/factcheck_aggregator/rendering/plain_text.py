"""Plain-text renderings of a FactCheckReport.

format_for_clipboard() is the stable "label: value" export used by the copy
button; format_report_text() writes the four-section report convention that
backends answer in, so a report can be fed back through parse_report().
"""

from __future__ import annotations

from typing import List

from ..schemas.report import FactCheckReport, Source, parse_percentage


def truth_color(percentage: str) -> str:
    """Colour band for the truth meter."""
    value = parse_percentage(percentage)
    if value is None:
        return "black"
    if value >= 80:
        return "green"
    if value >= 60:
        return "goldenrod"
    if value >= 40:
        return "orange"
    return "red"


def _source_line(source: Source) -> str:
    if source.has_url:
        return f"{source.index}. [{source.title}]({source.url})"
    return f"{source.index}. {source.title}"


def format_report_text(report: FactCheckReport) -> str:
    sources_block = "\n".join(["Sources:"] + [_source_line(s) for s in report.sources])
    blocks = [
        sources_block,
        f"Truth: {report.truth_percentage}",
        f"Fact Check: {report.fact_check}",
        f"Context: {report.context}",
    ]
    return "\n\n".join(blocks)


def format_for_clipboard(report: FactCheckReport) -> str:
    lines: List[str] = [f"{s.index}. {s.title} - {s.url}" for s in report.sources]
    text = (
        f"Truth Percentage: {report.truth_percentage}\n\n"
        f"Fact Check: {report.fact_check}\n\n"
        f"Context: {report.context}\n\n"
        "Sources:\n" + "\n".join(lines)
    )
    return text.strip()
