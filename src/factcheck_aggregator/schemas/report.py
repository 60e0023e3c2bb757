"""Pydantic schemas for fact-check reports.

Defines Source, FactCheckReport and BackendResult. All three are frozen:
the parser builds them once per backend response and the reconciler
produces new instances instead of editing its inputs.
"""

from __future__ import annotations

import re
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

# Sentinels for absent sections, distinct from empty strings
TRUTH_UNAVAILABLE = "N/A"
NO_FACT_CHECK = "No fact check provided."
NO_CONTEXT = "No context provided."
NO_URL = "#"

_LEADING_INT_RE = re.compile(r"\s*(\d+)")


def parse_percentage(value: Optional[str]) -> Optional[int]:
    """Leading integer of `value` if it lies in 0..100, else None ("80%" -> 80)."""
    match = _LEADING_INT_RE.match(value or "")
    if not match:
        return None
    number = int(match.group(1))
    if number > 100:
        return None
    return number


class Source(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: str
    title: str
    url: str = NO_URL

    @property
    def has_url(self) -> bool:
        return self.url != NO_URL


class FactCheckReport(BaseModel):
    """
    Structured result of one backend, or of the merge of several.
    Serialises with the camelCase names used by the extension UI.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    truth_percentage: str = Field(TRUTH_UNAVAILABLE, alias="truthPercentage")
    fact_check: str = Field(NO_FACT_CHECK, alias="factCheck")
    context: str = NO_CONTEXT
    sources: List[Source] = Field(default_factory=list)

    def source_by_index(self, index: str) -> Optional[Source]:
        for source in self.sources:
            if source.index == index:
                return source
        return None

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class BackendResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    backend_name: str
    raw_text: Optional[str] = None
    report: Optional[FactCheckReport] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
