"""Async boundary between storage, the report assembler, and renderers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import structlog

from ledger_reports.config.categories import load_category_rules
from ledger_reports.config.logging import report_context
from ledger_reports.config.settings import ReportSettings, get_settings
from ledger_reports.errors import RenderError, ReportError, StorageError
from ledger_reports.reports.assembler import ReportAssembler, parse_report_type
from ledger_reports.reports.types import Report, ReportPeriod, ReportType, TaxSummaryReport
from ledger_reports.thresholds import ThresholdAnalyzer

logger = structlog.get_logger(__name__)


class TransactionStore(ABC):
    """Read-only access to a user's ledger."""

    @abstractmethod
    async def get_transactions(self, user_id: str, filters: dict[str, Any]) -> Any:
        """Return ``{"transactions": [...], "total": n}`` or a bare list.

        ``filters`` may carry startDate, endDate, companyId, type and limit.
        """

    @abstractmethod
    async def get_employees(self, user_id: str) -> list[dict[str, Any]]:
        """Return the user's employee profiles."""


class ReportRenderer(ABC):
    """Turns a serialized report into a document such as a PDF."""

    @abstractmethod
    async def render(self, report: dict[str, Any], options: dict[str, Any]) -> dict[str, Any]:
        """Return ``{"buffer": bytes, "fileName": str, "size": int}``."""


@dataclass
class RenderedReport:
    buffer: bytes
    file_name: str
    size: int


def report_file_name(report: Report, extension: str = "pdf") -> str:
    """Download name for a rendered report, e.g. ``profit-loss-2025-01-01-2025-12-31.pdf``."""
    slug = report.report_type.slug
    if isinstance(report, TaxSummaryReport):
        return f"{slug}-{report.tax_year}.{extension}"
    start, end = report.period.start_date, report.period.end_date
    if start is None or end is None:
        return f"{slug}.{extension}"
    return f"{slug}-{start}-{end}.{extension}"


class ReportService:
    """Fetches a ledger slice and builds a report from it."""

    def __init__(
        self,
        store: TransactionStore,
        assembler: ReportAssembler | None = None,
        settings: ReportSettings | None = None,
    ):
        settings = settings or get_settings()
        self._store = store
        self._assembler = assembler or ReportAssembler(
            load_category_rules(settings.category_rules_path),
            ThresholdAnalyzer.from_settings(settings),
        )
        self._fetch_limit = settings.transaction_fetch_limit
        self._logger = logger.bind(component="report_service")

    @property
    def assembler(self) -> ReportAssembler:
        return self._assembler

    async def generate(
        self,
        user_id: str,
        report_type: ReportType | str,
        start_date: Any = None,
        end_date: Any = None,
        company_id: str | None = None,
        tax_year: int | None = None,
    ) -> Report:
        """Fetch transactions for the period and assemble the report.

        Raises:
            UnsupportedReportTypeError: Before any fetch, for an unknown type.
            StorageError: If the store fails.
        """
        kind = parse_report_type(report_type)

        filters: dict[str, Any] = {
            "startDate": start_date,
            "endDate": end_date,
            "limit": self._fetch_limit,
        }
        if company_id:
            filters["companyId"] = company_id

        with report_context(report_type=kind.value, user_id=user_id):
            transactions = await self._fetch(
                "transactions", self._store.get_transactions(user_id, filters)
            )
            employees = None
            if kind is ReportType.EMPLOYEE_SUMMARY:
                employees = await self._fetch("employees", self._store.get_employees(user_id))

            return self._assembler.assemble(
                kind,
                transactions,
                ReportPeriod(start_date=start_date, end_date=end_date),
                employees=employees or [],
                tax_year=tax_year,
            )

    async def _fetch(self, what: str, pending: Any) -> Any:
        try:
            return await pending
        except ReportError:
            raise
        except Exception as exc:
            self._logger.error("report_fetch_failed", resource=what, error=str(exc))
            raise StorageError(f"Failed to fetch {what}: {exc}") from exc

    async def render(
        self,
        report: Report,
        renderer: ReportRenderer,
        options: dict[str, Any] | None = None,
    ) -> RenderedReport:
        """Hand a finished report to a renderer.

        Raises:
            RenderError: If the renderer fails or returns no document.
        """
        try:
            result = await renderer.render(report.to_dict(), options or {})
        except Exception as exc:
            self._logger.error(
                "report_render_failed",
                report_type=report.report_type.value,
                error=str(exc),
            )
            raise RenderError(f"Failed to render report: {exc}") from exc

        buffer = result.get("buffer") if isinstance(result, dict) else None
        if buffer is None:
            raise RenderError("Renderer returned no document", details=result)

        rendered = RenderedReport(
            buffer=buffer,
            file_name=result.get("fileName") or report_file_name(report),
            size=result.get("size") or len(buffer),
        )
        self._logger.info(
            "report_rendered", file_name=rendered.file_name, size=rendered.size
        )
        return rendered
