"""Dashboard statistics: headline counts and trends, monthly revenue, per-property performance.

Everything here is a pure function of already-loaded snapshots (and, for
the monthly figures, an explicit ``now``); loading and the clock live in
``dashboard_service``.
"""

import math
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from app.schemas.dashboard import (
    DashboardStats,
    MonthlyRevenuePoint,
    PropertyPerformance,
    PropertyPerformanceResponse,
    PropertyPerformanceSummary,
    PropertySnapshot,
    ReservationSnapshot,
)

# Occupancy assumes every active property is available this many days per month
DAYS_PER_MONTH = 30

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"

_ONE_DAY = timedelta(days=1)
_CENT = Decimal("0.01")
_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def percentage_change(current: Decimal | int, previous: Decimal | int) -> Decimal:
    """Signed percentage change from ``previous`` to ``current``.

    A non-positive ``previous`` gives exactly ``0``: there is no baseline to
    compare against, so no trend is reported.
    """
    if previous > 0:
        return _quantize(Decimal(current - previous) * 100 / Decimal(previous))
    return _quantize(_ZERO)


def previous_month(year: int, month: int) -> tuple[int, int]:
    """Return the (year, month) before the given one, wrapping at January."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def _month_of(moment: datetime | None) -> tuple[int, int] | None:
    if moment is None:
        return None
    return moment.year, moment.month


def _revenue(reservations: Iterable[ReservationSnapshot]) -> Decimal:
    return sum((r.total_price for r in reservations), _ZERO)


def _average(total: Decimal, count: int) -> Decimal:
    if count > 0:
        return _quantize(total / count)
    return _quantize(_ZERO)


def stay_days(reservation: ReservationSnapshot) -> int:
    """Nights occupied by a reservation, rounding partial days up.

    Reservations with a missing date occupy nothing; a check-out before the
    check-in gives a negative count.
    """
    if reservation.check_in is None or reservation.check_out is None:
        return 0
    return math.ceil((reservation.check_out - reservation.check_in) / _ONE_DAY)


def compute_stats(
    properties: Iterable[PropertySnapshot],
    reservations: Iterable[ReservationSnapshot],
    now: datetime,
) -> DashboardStats:
    """Compute the dashboard figures for one tenant.

    Args:
        properties: All of the tenant's properties, in any order.
        reservations: All of the tenant's reservations, in any order.
        now: Reference instant. Only its calendar year and month are used, read
            from its own wall-clock fields.

    Returns:
        A fully populated ``DashboardStats``. Empty inputs give all zeros.
    """
    properties = list(properties)
    reservations = list(reservations)

    active_properties = sum(1 for p in properties if p.is_active)
    pending_reservations = sum(1 for r in reservations if r.status == STATUS_PENDING)
    confirmed = [r for r in reservations if r.status == STATUS_CONFIRMED]

    current_month = (now.year, now.month)
    last_month = previous_month(*current_month)
    this_month_confirmed = [r for r in confirmed if _month_of(r.check_in) == current_month]
    last_month_confirmed = [r for r in confirmed if _month_of(r.check_in) == last_month]

    monthly_revenue = _revenue(this_month_confirmed)
    last_month_revenue = _revenue(last_month_confirmed)

    total_days = active_properties * DAYS_PER_MONTH
    occupied_days = sum(stay_days(r) for r in confirmed)
    if total_days > 0:
        occupancy_rate = _quantize(Decimal(occupied_days) * 100 / Decimal(total_days))
    else:
        occupancy_rate = _quantize(_ZERO)

    return DashboardStats(
        as_of=now,
        total_properties=len(properties),
        active_properties=active_properties,
        total_reservations=len(reservations),
        pending_reservations=pending_reservations,
        total_revenue=_revenue(confirmed),
        monthly_revenue=monthly_revenue,
        last_month_revenue=last_month_revenue,
        monthly_reservations=len(this_month_confirmed),
        last_month_reservations=len(last_month_confirmed),
        occupied_days=occupied_days,
        total_days=total_days,
        occupancy_rate=occupancy_rate,
        revenue_trend=percentage_change(monthly_revenue, last_month_revenue),
        reservations_trend=percentage_change(len(this_month_confirmed), len(last_month_confirmed)),
    )


def monthly_revenue_series(
    reservations: Iterable[ReservationSnapshot],
    now: datetime,
    months: int = 6,
) -> list[MonthlyRevenuePoint]:
    """Group confirmed revenue by check-in month for the last ``months`` months.

    The window ends with the month of ``now`` and is returned oldest first.
    Growth for the first point is measured against the month just before the
    window, so every point has a real baseline.

    Raises:
        ValueError: If ``months`` is less than 1.
    """
    if months < 1:
        raise ValueError("months must be at least 1")

    keys = [(now.year, now.month)]
    for _ in range(months):
        keys.append(previous_month(*keys[-1]))
    keys.reverse()  # baseline month first, current month last

    revenue = {key: _ZERO for key in keys}
    counts = {key: 0 for key in keys}
    for r in reservations:
        key = _month_of(r.check_in)
        if r.status == STATUS_CONFIRMED and key in revenue:
            revenue[key] += r.total_price
            counts[key] += 1

    points: list[MonthlyRevenuePoint] = []
    for previous_key, key in zip(keys, keys[1:]):
        points.append(
            MonthlyRevenuePoint(
                month=f"{key[0]:04d}-{key[1]:02d}",
                revenue=revenue[key],
                reservations=counts[key],
                average_ticket=_average(revenue[key], counts[key]),
                growth=percentage_change(revenue[key], revenue[previous_key]),
            )
        )
    return points


def property_performance(
    properties: Iterable[PropertySnapshot],
    reservations: Iterable[ReservationSnapshot],
) -> PropertyPerformanceResponse:
    """Rank properties by the revenue of their non-cancelled reservations.

    Occupancy uses the same 30-day month as ``compute_stats`` but is capped
    at 100 per property. Ties in revenue keep the input order. An empty
    portfolio gives an average occupancy of 0 and no top performer.
    """
    properties = list(properties)

    stays_by_property: dict[str, list[ReservationSnapshot]] = defaultdict(list)
    for r in reservations:
        if r.status != STATUS_CANCELLED and r.property_id is not None:
            stays_by_property[str(r.property_id)].append(r)

    rows: list[PropertyPerformance] = []
    for p in properties:
        stays = stays_by_property.get(str(p.id), [])
        occupied_days = sum(stay_days(r) for r in stays)
        occupancy = min(Decimal(occupied_days) * 100 / DAYS_PER_MONTH, _HUNDRED)
        rows.append(
            PropertyPerformance(
                id=p.id,
                name=p.name,
                location=p.location,
                is_active=p.is_active,
                revenue=_revenue(stays),
                reservations=len(stays),
                occupied_days=occupied_days,
                occupancy_rate=_quantize(occupancy),
                average_nightly=p.base_price_per_night,
            )
        )
    rows.sort(key=lambda row: row.revenue, reverse=True)

    return PropertyPerformanceResponse(
        properties=rows,
        summary=PropertyPerformanceSummary(
            total_properties=len(rows),
            active_properties=sum(1 for row in rows if row.is_active),
            average_occupancy=_average(sum((row.occupancy_rate for row in rows), _ZERO), len(rows)),
            top_performer=rows[0] if rows else None,
        ),
    )
