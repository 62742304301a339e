"""
Value objects for order records, derived dashboard views and the executive
report.

Every derived type is recomputed from scratch on each filter change and is
never mutated in place, so all dataclasses here are frozen.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from .config import COLUMN_FIELD_MAP


# ---------------------------------------------------------------------------
# Closed variant sets
# ---------------------------------------------------------------------------
class DateRange(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7_DAYS = "last7days"
    THIS_MONTH = "thismonth"
    ALL = "all"


class TimeSlot(str, Enum):
    ALL = "all"
    MORNING = "morning"
    LUNCH = "lunch"
    DINNER = "dinner"


class StatusColor(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class InsightKind(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    INFO = "info"


class ActionColor(str, Enum):
    GREEN = "green"
    AMBER = "amber"
    BLUE = "blue"
    PURPLE = "purple"


def _plain(value: Any) -> Any:
    """asdict() dict_factory helper: unwrap enums to their string values."""
    if isinstance(value, Enum):
        return value.value
    return value


def _to_plain_dict(obj) -> dict:
    return asdict(obj, dict_factory=lambda items: {k: _plain(v) for k, v in items})


# ---------------------------------------------------------------------------
# Source records
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class OrderRecord:
    """One line item within an order.

    ``order_id`` is shared across the line items of one customer order.
    ``total_amount`` is carried as given; it is not re-derived from
    quantity and unit price.
    """

    date: str
    time: str
    order_id: str
    item_name: str
    category: str
    quantity: int
    unit_price: float
    total_amount: float

    def to_row(self) -> dict[str, Any]:
        """Return the record keyed by source column name."""
        return {column: getattr(self, attr) for column, attr in COLUMN_FIELD_MAP.items()}

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderRecord":
        return cls(
            date=str(data["date"]),
            time=str(data["time"]),
            order_id=str(data["order_id"]),
            item_name=str(data["item_name"]),
            category=str(data["category"]),
            quantity=int(data["quantity"]),
            unit_price=float(data["unit_price"]),
            total_amount=float(data["total_amount"]),
        )


@dataclass(frozen=True)
class FilterState:
    date_range: DateRange = DateRange.ALL
    category: str = "all"
    time_slot: TimeSlot = TimeSlot.ALL


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class DashboardMetrics:
    total_revenue: float
    total_orders: int
    average_bill_value: float
    revenue_change: float
    orders_change: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TrendDataPoint:
    date: str
    revenue: float


@dataclass(frozen=True)
class ItemSalesData:
    name: str
    quantity: int
    revenue: float


@dataclass(frozen=True)
class CategoryData:
    name: str
    value: float
    percentage: float


@dataclass(frozen=True)
class HourlyData:
    hour: str
    sales: float
    is_peak: bool


@dataclass(frozen=True)
class Insight:
    kind: InsightKind
    message: str
    icon: str

    def to_dict(self) -> dict[str, Any]:
        return _to_plain_dict(self)


@dataclass(frozen=True)
class PerformanceStatus:
    label: str
    color: StatusColor
    trend: Trend


# ---------------------------------------------------------------------------
# Executive report
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ReportStatus:
    label: str
    color: StatusColor
    description: str


@dataclass(frozen=True)
class RevenueSummary:
    value: str
    trend: Trend
    trend_label: str


@dataclass(frozen=True)
class NamedQuantity:
    name: str
    quantity: int


@dataclass(frozen=True)
class NamedRevenue:
    name: str
    revenue: float


@dataclass(frozen=True)
class TimeStory:
    peak_window: str
    hourly_bars: tuple[HourlyData, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ReportAction:
    title: str
    icon: str
    color: ActionColor


@dataclass(frozen=True)
class ExecutiveReportData:
    title: str
    date_range: str
    status: ReportStatus
    revenue: RevenueSummary
    top_item: NamedQuantity
    best_category: NamedRevenue
    slow_item: NamedQuantity
    low_category: NamedRevenue
    time_story: TimeStory
    actions: tuple[ReportAction, ...]

    def to_dict(self) -> dict[str, Any]:
        return _to_plain_dict(self)
