"""
Sales reports against /reports.

Period reports (daily, weekly, monthly) are loaded together for the reports
page; a failing period is logged and shown as empty rather than failing the
page. The custom range is validated locally before the backend is called.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Union

from pos_admin import domain
from pos_admin.api_client import ApiClient
from pos_admin.config import REPORT_KINDS
from pos_admin.exceptions import InvalidDateRangeError, PosAdminError, ValidationError
from pos_admin.logging_config import log_error
from pos_admin.models import CategoryRevenue, SalesReport
from pos_admin.services._forms import parse_model, parse_models

logger = logging.getLogger(__name__)

PATH = "/reports"

DateLike = Union[date, str, None]


def _iso(value: DateLike) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _parse(value: DateLike) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise ValidationError("Tanggal tidak valid", field="date", detail=str(value)) from exc


def _report(data: Any, path: str) -> Optional[SalesReport]:
    if not data:
        return None
    return parse_model(SalesReport, data, path=path)


def validate_range(start_date: DateLike, end_date: DateLike) -> tuple[date, date]:
    """
    Check a custom report range.

    Raises:
        InvalidDateRangeError: a bound is missing or start is after end.
    """
    start, end = _parse(start_date), _parse(end_date)
    if start is None or end is None:
        raise InvalidDateRangeError(
            "Silakan pilih tanggal mulai dan tanggal akhir",
            start_date=_iso(start_date),
            end_date=_iso(end_date),
        )
    if start > end:
        raise InvalidDateRangeError(
            "Tanggal mulai harus sebelum tanggal akhir",
            start_date=start.isoformat(),
            end_date=end.isoformat(),
        )
    return start, end


def daily(client: ApiClient, day: date) -> Optional[SalesReport]:
    path = f"{PATH}/daily"
    return _report(client.get(path, {"date": day.isoformat()}), path)


def weekly(client: ApiClient, start_date: date) -> Optional[SalesReport]:
    path = f"{PATH}/weekly"
    return _report(client.get(path, {"startDate": start_date.isoformat()}), path)


def monthly(client: ApiClient, month: str) -> Optional[SalesReport]:
    path = f"{PATH}/monthly"
    return _report(client.get(path, {"month": month}), path)


def custom(client: ApiClient, start_date: DateLike, end_date: DateLike) -> Optional[SalesReport]:
    start, end = validate_range(start_date, end_date)
    path = f"{PATH}/custom"
    return _report(client.get(path, {"startDate": start.isoformat(), "endDate": end.isoformat()}), path)


def revenue_by_category(client: ApiClient, start_date: date, end_date: date) -> list[CategoryRevenue]:
    path = f"{PATH}/revenue-by-category"
    data = client.get(path, {"startDate": start_date.isoformat(), "endDate": end_date.isoformat()})
    return parse_models(CategoryRevenue, data, path=path)


def export_params(
    kind: str,
    today: date,
    start_date: DateLike = None,
    end_date: DateLike = None,
) -> dict[str, str]:
    """Query parameters for /reports/export/pdf."""
    if kind not in REPORT_KINDS:
        raise ValidationError(f"Unknown report type {kind!r}", field="type")

    params: dict[str, str] = {"type": kind}
    if kind == "daily":
        params["date"] = today.isoformat()
    elif kind == "weekly":
        params["startDate"] = domain.week_start(today).isoformat()
    elif kind == "monthly":
        params["month"] = domain.month_key(today)
    else:
        start, end = validate_range(start_date, end_date)
        params["startDate"] = start.isoformat()
        params["endDate"] = end.isoformat()
    return params


def export_pdf(
    client: ApiClient,
    kind: str,
    today: date,
    start_date: DateLike = None,
    end_date: DateLike = None,
) -> bytes:
    """Download the backend-rendered PDF for a report period."""
    return client.download(f"{PATH}/export/pdf", export_params(kind, today, start_date, end_date))


# =============================================================================
# Page loaders
# =============================================================================


@dataclass
class DashboardStats:
    daily: Optional[SalesReport] = None
    monthly: Optional[SalesReport] = None
    category_revenue: list[CategoryRevenue] = field(default_factory=list)


@dataclass
class PeriodReports:
    daily: Optional[SalesReport] = None
    weekly: Optional[SalesReport] = None
    monthly: Optional[SalesReport] = None
    custom: Optional[SalesReport] = None

    def get(self, kind: str) -> Optional[SalesReport]:
        return getattr(self, kind)


def load_dashboard(client: ApiClient, today: date) -> DashboardStats:
    """Today's and this month's figures plus this month's revenue by category.

    Any failure propagates so the page can show one connection warning.
    """
    first, last = domain.month_bounds(today)
    return DashboardStats(
        daily=daily(client, today),
        monthly=monthly(client, domain.month_key(today)),
        category_revenue=revenue_by_category(client, first, last),
    )


def load_period_reports(client: ApiClient, today: date) -> PeriodReports:
    """Daily, weekly (from Monday) and monthly reports; failures become None."""
    loaders = {
        "daily": lambda: daily(client, today),
        "weekly": lambda: weekly(client, domain.week_start(today)),
        "monthly": lambda: monthly(client, domain.month_key(today)),
    }
    reports = PeriodReports()
    for kind, load in loaders.items():
        try:
            setattr(reports, kind, load())
        except PosAdminError as exc:
            log_error("report_load_failed", exc, report_type=kind)
    return reports
