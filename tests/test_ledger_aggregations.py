from datetime import date, datetime, timedelta, timezone

import pytest

from enums.rent_period_status import RentPeriodStatus
from schemas.ledger_schema import (
    BuildingPeriodRow,
    BuildingRef,
    DuePeriodRow,
    PaymentRow,
    UnpaidPeriodRow,
)
from services.ledger_aggregations import (
    AGING_BUCKETS,
    build_building_rollups,
    build_collection_rate,
    build_delinquency_aging,
    collection_rate,
    empty_aging_buckets,
    find_bucket,
    round_money,
)

GENERATED_AT = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

DUE = RentPeriodStatus.DUE
OVERDUE = RentPeriodStatus.OVERDUE


def unpaid(status, amount, days=None, id="rp"):
    return UnpaidPeriodRow(id=id, status=status, days_overdue=days, amount=amount)


def in_building(name, amount, status=OVERDUE, building_id=None, address=None):
    return BuildingPeriodRow(
        status=status,
        amount=amount,
        building=BuildingRef(id=building_id or name.lower(), name=name, address=address),
    )


def bucket_amounts(report):
    return {b.label: (b.unpaid_periods, b.unpaid_amount) for b in report.buckets}


# --- Delinquency aging ---


def test_buckets_partition_non_negative_days():
    buckets = empty_aging_buckets()
    for days in range(0, 400):
        matches = [
            b for b in buckets
            if days >= b.min_days and (b.max_days is None or days <= b.max_days)
        ]
        assert len(matches) == 1, days
        assert find_bucket(buckets, days) is matches[0]


@pytest.mark.parametrize(
    "days, label",
    [
        (0, "0–7"),
        (7, "0–7"),
        (8, "8–15"),
        (15, "8–15"),
        (16, "16–30"),
        (30, "16–30"),
        (31, "31+"),
        (10_000, "31+"),
    ],
)
def test_bucket_boundaries_are_inclusive(days, label):
    assert find_bucket(empty_aging_buckets(), days).label == label


def test_oak_tower_scenario():
    rows = [
        unpaid(OVERDUE, 500, days=15, id="a"),
        unpaid(OVERDUE, 500, days=40, id="b"),
        unpaid(DUE, 300, id="c"),
    ]

    report = build_delinquency_aging(rows, GENERATED_AT)

    assert bucket_amounts(report) == {
        "0–7": (1, 300.0),
        "8–15": (1, 500.0),
        "16–30": (0, 0.0),
        "31+": (1, 500.0),
    }
    assert report.totals.unpaid_periods == 3
    assert report.totals.unpaid_amount == 1300.0
    assert report.totals.due_periods == 1
    assert report.totals.overdue_periods == 2
    assert report.generated_at == GENERATED_AT


def test_due_period_counts_as_zero_days_regardless_of_days_overdue():
    report = build_delinquency_aging([unpaid(DUE, 100, days=45)], GENERATED_AT)

    assert bucket_amounts(report)["0–7"] == (1, 100.0)
    assert bucket_amounts(report)["31+"] == (0, 0.0)


@pytest.mark.parametrize("days", [None, -3])
def test_overdue_with_missing_or_negative_days_is_clamped_to_zero(days):
    report = build_delinquency_aging([unpaid(OVERDUE, 250, days=days)], GENERATED_AT)

    assert bucket_amounts(report)["0–7"] == (1, 250.0)
    assert report.totals.overdue_periods == 1


def test_empty_input_still_returns_all_buckets_in_order():
    report = build_delinquency_aging([], GENERATED_AT)

    assert [b.label for b in report.buckets] == [label for label, _, _ in AGING_BUCKETS]
    assert [b.max_days for b in report.buckets] == [7, 15, 30, None]
    assert all(b.unpaid_periods == 0 for b in report.buckets)
    assert report.totals.unpaid_periods == 0
    assert report.totals.unpaid_amount == 0.0


def test_bucket_counts_sum_to_totals():
    rows = [
        unpaid(OVERDUE if i % 3 else DUE, 100 + i, days=i * 4, id=str(i))
        for i in range(25)
    ]

    report = build_delinquency_aging(rows, GENERATED_AT)

    assert sum(b.unpaid_periods for b in report.buckets) == report.totals.unpaid_periods == 25
    assert round_money(sum(b.unpaid_amount for b in report.buckets)) == report.totals.unpaid_amount
    assert report.totals.due_periods + report.totals.overdue_periods == 25


# --- Building rollups ---


def test_equal_amounts_are_ordered_by_name():
    rows = [in_building("Birch", 1000), in_building("Alder", 1000)]

    report = build_building_rollups(rows, GENERATED_AT)

    assert [r.building.name for r in report.rows] == ["Alder", "Birch"]


def test_larger_unpaid_amount_ranks_first():
    rows = [
        in_building("Alder", 200),
        in_building("Cedar", 700),
        in_building("Birch", 300),
        in_building("Birch", 300),
    ]

    report = build_building_rollups(rows, GENERATED_AT)

    assert [(r.building.name, r.unpaid_amount) for r in report.rows] == [
        ("Cedar", 700.0),
        ("Birch", 600.0),
        ("Alder", 200.0),
    ]


def test_name_tie_break_ignores_case():
    rows = [in_building("birch", 500), in_building("Cedar", 500), in_building("alder", 500)]

    report = build_building_rollups(rows, GENERATED_AT)

    assert [r.building.name for r in report.rows] == ["alder", "birch", "Cedar"]


def test_accented_names_sort_with_their_base_letter():
    rows = [in_building("Zephyr", 500), in_building("Élan", 500), in_building("Alder", 500)]

    report = build_building_rollups(rows, GENERATED_AT)

    assert [r.building.name for r in report.rows] == ["Alder", "Élan", "Zephyr"]


def test_names_differing_only_in_case_put_lowercase_first():
    rows = [
        in_building("Alder", 500, building_id="b-upper"),
        in_building("alder", 500, building_id="b-lower"),
    ]

    report = build_building_rollups(rows, GENERATED_AT)

    assert [r.building.id for r in report.rows] == ["b-lower", "b-upper"]


def test_identical_names_fall_back_to_building_id():
    rows = [
        in_building("Oak Tower", 500, building_id="b-2"),
        in_building("Oak Tower", 500, building_id="b-1"),
    ]

    report = build_building_rollups(rows, GENERATED_AT)

    assert [r.building.id for r in report.rows] == ["b-1", "b-2"]


def test_rollup_counts_statuses_per_building_and_totals():
    rows = [
        in_building("Oak Tower", 500, OVERDUE, address="1 Oak St"),
        in_building("Oak Tower", 500, OVERDUE, address="1 Oak St"),
        in_building("Oak Tower", 300, DUE, address="1 Oak St"),
        in_building("Pine Court", 800, DUE),
    ]

    report = build_building_rollups(rows, GENERATED_AT)

    oak, pine = report.rows
    assert oak.building == BuildingRef(id="oak tower", name="Oak Tower", address="1 Oak St")
    assert (oak.unpaid_periods, oak.overdue_periods, oak.due_periods, oak.unpaid_amount) == (3, 2, 1, 1300.0)
    assert (pine.unpaid_periods, pine.overdue_periods, pine.due_periods, pine.unpaid_amount) == (1, 0, 1, 800.0)
    assert report.totals.buildings_with_unpaid == 2
    assert report.totals.unpaid_periods == 4
    assert report.totals.overdue_periods == 2
    assert report.totals.due_periods == 2
    assert report.totals.unpaid_amount == 2100.0


def test_buildings_with_same_name_stay_separate():
    rows = [
        in_building("Annex", 100, building_id="b-2"),
        in_building("Annex", 100, building_id="b-1"),
    ]

    report = build_building_rollups(rows, GENERATED_AT)

    assert [r.building.id for r in report.rows] == ["b-1", "b-2"]
    assert report.totals.buildings_with_unpaid == 2


def test_no_unpaid_rows_gives_empty_rollup():
    report = build_building_rollups([], GENERATED_AT)

    assert report.rows == []
    assert report.totals.buildings_with_unpaid == 0
    assert report.totals.unpaid_amount == 0.0


# --- Collection rate ---

JAN_START = date(2024, 1, 1)
JAN_END = date(2024, 1, 31)


def test_january_window_scenario():
    periods = [DuePeriodRow(id="p1", amount=1000)]
    payments = [
        PaymentRow(rent_period_id="p1", amount=400, paid_at=datetime(2024, 1, 20, 10, 0)),
        PaymentRow(rent_period_id="p1", amount=600, paid_at=datetime(2024, 2, 5, 10, 0)),
    ]

    report = build_collection_rate(periods, payments, JAN_START, JAN_END, GENERATED_AT)

    assert report.metrics.total_due == 1000.0
    assert report.metrics.total_collected == 400.0
    assert report.metrics.collection_rate == 40.0
    assert report.metrics.period_count == 1
    assert report.metrics.paid_period_count == 1
    assert report.date_range.start_date == "2024-01-01"
    assert report.date_range.end_date == "2024-01-31"


def test_no_periods_gives_zero_report():
    payments = [PaymentRow(rent_period_id="p1", amount=400, paid_at=datetime(2024, 1, 20))]

    report = build_collection_rate([], payments, JAN_START, JAN_END, GENERATED_AT)

    assert report.metrics.model_dump() == {
        "total_due": 0.0,
        "total_collected": 0.0,
        "collection_rate": 0.0,
        "period_count": 0,
        "paid_period_count": 0,
    }


@pytest.mark.parametrize("collected", [0, 50, 1_000_000])
def test_rate_is_zero_when_nothing_is_due(collected):
    assert collection_rate(collected, 0) == 0.0


def test_rate_may_exceed_one_hundred():
    periods = [DuePeriodRow(id="p1", amount=1000)]
    payments = [
        PaymentRow(rent_period_id="p1", amount=700, paid_at=datetime(2024, 1, 10)),
        PaymentRow(rent_period_id="p1", amount=800, paid_at=datetime(2024, 1, 11)),
    ]

    report = build_collection_rate(periods, payments, JAN_START, JAN_END, GENERATED_AT)

    assert report.metrics.collection_rate == 150.0
    assert report.metrics.paid_period_count == 1


def test_partial_payments_count_their_period_once():
    periods = [DuePeriodRow(id="p1", amount=900), DuePeriodRow(id="p2", amount=900)]
    payments = [
        PaymentRow(rent_period_id="p1", amount=300, paid_at=datetime(2024, 1, 2)),
        PaymentRow(rent_period_id="p1", amount=300, paid_at=datetime(2024, 1, 3)),
        PaymentRow(rent_period_id="p1", amount=300, paid_at=datetime(2024, 1, 4)),
    ]

    report = build_collection_rate(periods, payments, JAN_START, JAN_END, GENERATED_AT)

    assert report.metrics.total_collected == 900.0
    assert report.metrics.paid_period_count == 1
    assert report.metrics.period_count == 2
    assert report.metrics.collection_rate == 50.0


def test_payments_for_periods_outside_the_set_are_ignored():
    periods = [DuePeriodRow(id="p1", amount=1000)]
    payments = [PaymentRow(rent_period_id="other", amount=1000, paid_at=datetime(2024, 1, 15))]

    report = build_collection_rate(periods, payments, JAN_START, JAN_END, GENERATED_AT)

    assert report.metrics.total_collected == 0.0
    assert report.metrics.paid_period_count == 0


def test_paid_at_window_covers_whole_end_day():
    periods = [DuePeriodRow(id="p1", amount=100)]
    last_second = datetime.combine(JAN_END, datetime.min.time()) + timedelta(hours=23, minutes=59, seconds=59)
    payments = [
        PaymentRow(rent_period_id="p1", amount=10, paid_at=datetime(2024, 1, 1, 0, 0, 0)),
        PaymentRow(rent_period_id="p1", amount=20, paid_at=last_second),
        PaymentRow(rent_period_id="p1", amount=40, paid_at=datetime(2024, 2, 1, 0, 0, 0)),
        PaymentRow(rent_period_id="p1", amount=80, paid_at=datetime(2023, 12, 31, 23, 59, 59)),
    ]

    report = build_collection_rate(periods, payments, JAN_START, JAN_END, GENERATED_AT)

    assert report.metrics.total_collected == 30.0


def test_aware_payment_timestamps_are_compared_in_utc():
    periods = [DuePeriodRow(id="p1", amount=100)]
    # 2024-01-31 20:00 at UTC-05:00 is 2024-02-01 01:00 UTC
    eastern = timezone(timedelta(hours=-5))
    payments = [
        PaymentRow(rent_period_id="p1", amount=25, paid_at=datetime(2024, 1, 31, 20, 0, tzinfo=eastern)),
        PaymentRow(rent_period_id="p1", amount=50, paid_at=datetime(2024, 1, 31, 18, 0, tzinfo=eastern)),
    ]

    report = build_collection_rate(periods, payments, JAN_START, JAN_END, GENERATED_AT)

    assert report.metrics.total_collected == 50.0


@pytest.mark.parametrize(
    "collected, due, expected",
    [
        (1, 3, 33.33),
        (2, 3, 66.67),
        (1, 8, 12.5),
    ],
)
def test_rate_rounds_to_two_places(collected, due, expected):
    assert collection_rate(collected, due) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(0.125, 0.13), (-0.125, -0.13), (2.675, 2.68), (1.005, 1.01), (10.0, 10.0)],
)
def test_round_money_rounds_half_away_from_zero(value, expected):
    assert round_money(value) == expected


def test_collection_rate_is_idempotent():
    periods = [DuePeriodRow(id=f"p{i}", amount=100 + i) for i in range(10)]
    payments = [
        PaymentRow(rent_period_id=f"p{i}", amount=50 + i, paid_at=datetime(2024, 1, 1 + i))
        for i in range(0, 10, 2)
    ]

    first = build_collection_rate(periods, payments, JAN_START, JAN_END, GENERATED_AT)
    second = build_collection_rate(periods, payments, JAN_START, JAN_END, GENERATED_AT)

    assert first == second
    assert first.metrics.collection_rate == round_money(
        first.metrics.total_collected / first.metrics.total_due * 100
    )
