"""Fact-check orchestration.

Fans the selection out to every configured backend concurrently, waits for
all of them to settle, then parses, reconciles and links the survivors.
"""

import asyncio
from typing import List, Optional, Sequence

from ..config import get_settings
from ..errors import AllBackendsFailed, BackendCallFailed, NoCredentialsConfigured
from ..log import get_logger
from ..parsing.report_parser import parse_report
from ..rendering.citations import Renderer, html_anchor, linkify
from ..schemas.credentials import BackendCredentials
from ..schemas.report import BackendResult, FactCheckReport
from ..backends import FactCheckBackend, get_backends
from .reconcile import reconcile

logger = get_logger("pipeline")


async def call_backend(
    backend: FactCheckBackend,
    selection: str,
    page_context: str,
    page_url: str,
    credentials: BackendCredentials,
    timeout: float,
) -> BackendResult:
    """Run one backend unit; every failure ends up in BackendResult.error."""
    try:
        raw = await asyncio.wait_for(
            backend.query(selection, page_context, page_url, credentials),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        reason = f"timed out after {timeout:g}s"
    except BackendCallFailed as e:
        reason = e.reason
    except Exception as e:
        logger.exception(f"Unexpected error from {backend.name}")
        reason = f"{type(e).__name__}: {e}"
    else:
        return BackendResult(backend_name=backend.name, raw_text=raw)

    logger.warning(f"{backend.name} failed: {reason}")
    return BackendResult(backend_name=backend.name, error=reason)


class FactCheckService:
    def __init__(self, backends: Optional[Sequence[FactCheckBackend]] = None, timeout: Optional[float] = None):
        self.backends = list(backends) if backends is not None else get_backends()
        self.timeout = timeout if timeout is not None else get_settings().BACKEND_TIMEOUT_S

    async def run(
        self,
        selection: str,
        page_context: str = "",
        page_url: str = "",
        credentials: Optional[BackendCredentials] = None,
        render: Renderer = html_anchor,
    ) -> FactCheckReport:
        if credentials is None:
            credentials = BackendCredentials.from_settings()
        active = [b for b in self.backends if b.is_configured(credentials)]
        if not active:
            raise NoCredentialsConfigured()

        logger.info(f"Fact checking {len(selection)} chars with {', '.join(b.name for b in active)}")

        results: List[BackendResult] = await asyncio.gather(*[
            call_backend(b, selection, page_context, page_url, credentials, self.timeout)
            for b in active
        ])

        succeeded = [
            r.model_copy(update={"report": parse_report(r.raw_text)})
            for r in results if r.ok
        ]
        if not succeeded:
            errors = {r.backend_name: r.error for r in results}
            logger.error(f"All backends failed: {errors}")
            raise AllBackendsFailed(errors)

        merged = reconcile(
            [r.report for r in succeeded],
            backend_names=[r.backend_name for r in succeeded],
        )
        return merged.model_copy(update={
            "fact_check": linkify(merged.fact_check, merged.sources, render),
            "context": linkify(merged.context, merged.sources, render),
        })


async def run_fact_check(
    selection: str,
    page_context: str = "",
    page_url: str = "",
    credentials: Optional[BackendCredentials] = None,
    backends: Optional[Sequence[FactCheckBackend]] = None,
    render: Renderer = html_anchor,
) -> FactCheckReport:
    service = FactCheckService(backends) if backends is not None else fact_check_service
    return await service.run(selection, page_context, page_url, credentials, render)


fact_check_service = FactCheckService()
