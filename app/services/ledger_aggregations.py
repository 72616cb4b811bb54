"""
Pure aggregation over projected ledger rows.

Nothing in this module touches the database or the clock: rows come
from ``LedgerStore`` and the generation timestamp is passed in, so the
same input always yields the same report.
"""

from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Tuple

from pyuca import Collator

from enums.rent_period_status import RentPeriodStatus
from schemas.ledger_schema import BuildingPeriodRow, DuePeriodRow, PaymentRow, UnpaidPeriodRow
from schemas.report_schema import (
    AgingTotals,
    BuildingRollupRow,
    BuildingRollupsReport,
    CollectionMetrics,
    CollectionRateReport,
    DateRange,
    DelinquencyAgingReport,
    DelinquencyBucket,
    RollupTotals,
)
from utils.date_utils import day_window, format_calendar_date

# (label, min_days, max_days); max_days None means no upper bound
AGING_BUCKETS: Tuple[Tuple[str, int, Optional[int]], ...] = (
    ("0–7", 0, 7),
    ("8–15", 8, 15),
    ("16–30", 16, 30),
    ("31+", 31, None),
)


def round_money(value: float, places: int = 2) -> float:
    """Round half away from zero at the given decimal place."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def effective_days_overdue(row: UnpaidPeriodRow) -> int:
    if row.status == RentPeriodStatus.DUE:
        return 0
    return max(0, row.days_overdue or 0)


def find_bucket(buckets: List[DelinquencyBucket], days: int) -> Optional[DelinquencyBucket]:
    for bucket in buckets:
        if days < bucket.min_days:
            continue
        if bucket.max_days is None or days <= bucket.max_days:
            return bucket
    return None


def empty_aging_buckets() -> List[DelinquencyBucket]:
    return [
        DelinquencyBucket(label=label, min_days=min_days, max_days=max_days)
        for label, min_days, max_days in AGING_BUCKETS
    ]


def build_delinquency_aging(
    rows: Iterable[UnpaidPeriodRow], generated_at: datetime
) -> DelinquencyAgingReport:
    buckets = empty_aging_buckets()
    totals = AgingTotals()

    for row in rows:
        totals.unpaid_periods += 1
        totals.unpaid_amount += row.amount
        if row.status == RentPeriodStatus.DUE:
            totals.due_periods += 1
        elif row.status == RentPeriodStatus.OVERDUE:
            totals.overdue_periods += 1

        bucket = find_bucket(buckets, effective_days_overdue(row))
        if bucket is None:
            continue
        bucket.unpaid_periods += 1
        bucket.unpaid_amount += row.amount

    for bucket in buckets:
        bucket.unpaid_amount = round_money(bucket.unpaid_amount)
    totals.unpaid_amount = round_money(totals.unpaid_amount)

    return DelinquencyAgingReport(buckets=buckets, totals=totals, generated_at=generated_at)


# Unicode collation (DUCET): accents and case order as secondary and tertiary differences
NAME_COLLATOR = Collator()


def rollup_sort_key(row: BuildingRollupRow):
    name = row.building.name
    return (-row.unpaid_amount, NAME_COLLATOR.sort_key(name), name, row.building.id)


def build_building_rollups(
    rows: Iterable[BuildingPeriodRow], generated_at: datetime
) -> BuildingRollupsReport:
    by_building: Dict[str, BuildingRollupRow] = {}

    for row in rows:
        rollup = by_building.get(row.building.id)
        if rollup is None:
            rollup = BuildingRollupRow(building=row.building)
            by_building[row.building.id] = rollup

        rollup.unpaid_periods += 1
        rollup.unpaid_amount += row.amount
        if row.status == RentPeriodStatus.OVERDUE:
            rollup.overdue_periods += 1
        elif row.status == RentPeriodStatus.DUE:
            rollup.due_periods += 1

    for rollup in by_building.values():
        rollup.unpaid_amount = round_money(rollup.unpaid_amount)

    ranked = sorted(by_building.values(), key=rollup_sort_key)

    totals = RollupTotals(buildings_with_unpaid=len(ranked))
    for rollup in ranked:
        totals.unpaid_periods += rollup.unpaid_periods
        totals.overdue_periods += rollup.overdue_periods
        totals.due_periods += rollup.due_periods
        totals.unpaid_amount += rollup.unpaid_amount
    totals.unpaid_amount = round_money(totals.unpaid_amount)

    return BuildingRollupsReport(rows=ranked, totals=totals, generated_at=generated_at)


def collection_rate(total_collected: float, total_due: float) -> float:
    if total_due <= 0:
        return 0.0
    return round_money(total_collected / total_due * 100)


def build_collection_rate(
    periods: Iterable[DuePeriodRow],
    payments: Iterable[PaymentRow],
    start: date,
    end: date,
    generated_at: datetime,
) -> CollectionRateReport:
    """
    Compute due-vs-collected for obligations due in ``start..end``.

    A payment counts only when it belongs to one of ``periods`` and its
    own ``paid_at`` lies in the same window (whole days, UTC). Payments
    are re-checked here even though the store already filters them.
    """
    date_range = DateRange(start_date=format_calendar_date(start), end_date=format_calendar_date(end))
    periods = list(periods)
    if not periods:
        return CollectionRateReport(
            metrics=CollectionMetrics(), date_range=date_range, generated_at=generated_at
        )

    period_ids = {period.id for period in periods}
    total_due = sum(period.amount for period in periods)

    paid_from, paid_to = day_window(start, end)
    total_collected = 0.0
    paid_periods = set()
    for payment in payments:
        if payment.rent_period_id not in period_ids:
            continue
        paid_at = payment.paid_at
        if paid_at.tzinfo is not None:
            paid_at = paid_at.astimezone(timezone.utc).replace(tzinfo=None)
        if not paid_from <= paid_at <= paid_to:
            continue
        total_collected += payment.amount
        paid_periods.add(payment.rent_period_id)

    metrics = CollectionMetrics(
        total_due=round_money(total_due),
        total_collected=round_money(total_collected),
        collection_rate=collection_rate(total_collected, total_due),
        period_count=len(periods),
        paid_period_count=len(paid_periods),
    )
    return CollectionRateReport(metrics=metrics, date_range=date_range, generated_at=generated_at)
