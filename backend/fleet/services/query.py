"""
Filtered, tenant-scoped, paginated reads shared by every list endpoint.

Each entity declares a ``ListSpec``: which filters it accepts, how rows are
ordered and whether an exact row count is computed. ``run_list`` turns a
criteria mapping plus a zero-based page window into a ``Page``. Filters are
AND-combined; empty values mean "no filter".
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from fleet.config import settings
from fleet.domain.validity import DocumentStatus, status_bounds
from fleet.services.auth_service import TenantContext

NO_RECORDS_MESSAGE = "No records found."


class QueryError(ValueError):
    """Invalid list request (unknown choice, bad page window)."""


class CountMode(str, Enum):
    EXACT = "exact"
    NONE = "none"


@dataclass(frozen=True)
class DateRange:
    start: date | None = None
    end: date | None = None

    def __bool__(self) -> bool:
        return self.start is not None or self.end is not None


def day_of(column):
    # Dates and timestamps are stored as ISO text; the first ten characters
    # are the calendar day.
    return func.substr(column, 1, 10)


@dataclass
class TextFilter:
    column: Any

    def apply(self, query: Query, value: str) -> Query:
        return query.filter(self.column.icontains(value, autoescape=True))


@dataclass
class EnumFilter:
    column: Any
    choices: tuple[str, ...]

    def apply(self, query: Query, value: str) -> Query:
        if value not in self.choices:
            raise QueryError(f"Invalid value {value!r}. Must be one of: {', '.join(self.choices)}")
        return query.filter(self.column == value)


@dataclass
class EqualsFilter:
    column: Any

    def apply(self, query: Query, value: str) -> Query:
        return query.filter(self.column == value)


@dataclass
class DateRangeFilter:
    column: Any

    def apply(self, query: Query, value: DateRange) -> Query:
        if value.start and value.end and value.start > value.end:
            raise QueryError("Start date must not be after end date")
        if value.start:
            query = query.filter(day_of(self.column) >= value.start.isoformat())
        if value.end:
            query = query.filter(day_of(self.column) <= value.end.isoformat())
        return query


@dataclass
class ExpiryStatusFilter:
    """Selects documents by validity bucket inside the query."""
    column: Any
    today: date | None = None

    def apply(self, query: Query, value: str) -> Query:
        try:
            status = DocumentStatus(value)
        except ValueError as exc:
            choices = ", ".join(s.value for s in DocumentStatus)
            raise QueryError(f"Invalid status {value!r}. Must be one of: {choices}") from exc

        bounds = status_bounds(status, self.today, settings.expiry_warning_days)
        if bounds.is_null:
            return query.filter(self.column.is_(None) | (self.column == ""))

        query = query.filter(self.column.isnot(None), self.column != "")
        day = day_of(self.column)
        if bounds.after:
            query = query.filter(day > bounds.after.isoformat())
        if bounds.on_or_after:
            query = query.filter(day >= bounds.on_or_after.isoformat())
        if bounds.before:
            query = query.filter(day < bounds.before.isoformat())
        if bounds.on_or_before:
            query = query.filter(day <= bounds.on_or_before.isoformat())
        return query


@dataclass
class ListSpec:
    model: Any
    filters: dict[str, Any]
    sort: list[tuple[Any, bool]]  # (column, descending)
    count_mode: CountMode = CountMode.EXACT


@dataclass
class Page:
    items: list = field(default_factory=list)
    total: int | None = None
    page: int = 0
    per_page: int = 10
    has_more: bool = False

    @property
    def message(self) -> str | None:
        return NO_RECORDS_MESSAGE if not self.items else None


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return not value


def validate_window(page: int, per_page: int) -> None:
    if page < 0:
        raise QueryError("Page must be zero or greater")
    if per_page not in settings.page_size_options:
        options = ", ".join(str(o) for o in settings.page_size_options)
        raise QueryError(f"per_page must be one of: {options}")


def build_query(db: Session, ctx: TenantContext, spec: ListSpec, criteria: dict[str, Any]) -> Query:
    query = db.query(spec.model).filter(spec.model.tenant_id == ctx.tenant_id)
    for name, value in criteria.items():
        if _is_empty(value):
            continue
        flt = spec.filters.get(name)
        if flt is None:
            raise QueryError(f"Unknown filter: {name}")
        if isinstance(value, str):
            value = value.strip()
        query = flt.apply(query, value)
    return query


def run_list(
    db: Session,
    ctx: TenantContext,
    spec: ListSpec,
    criteria: dict[str, Any],
    page: int = 0,
    per_page: int | None = None,
) -> Page:
    per_page = settings.default_page_size if per_page is None else per_page
    validate_window(page, per_page)

    query = build_query(db, ctx, spec, criteria)

    total = query.count() if spec.count_mode == CountMode.EXACT else None

    order = [col.desc() if descending else col.asc() for col, descending in spec.sort]
    order.append(spec.model.id.asc())
    query = query.order_by(*order).offset(page * per_page)

    if spec.count_mode == CountMode.EXACT:
        items = query.limit(per_page).all()
        has_more = (page + 1) * per_page < total
    else:
        # One extra row tells whether a next page exists without counting.
        items = query.limit(per_page + 1).all()
        has_more = len(items) > per_page
        items = items[:per_page]

    return Page(items=items, total=total, page=page, per_page=per_page, has_more=has_more)
