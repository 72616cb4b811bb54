from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional

from schemas.ledger_schema import BuildingRef


class DelinquencyBucket(BaseModel):
    label: str
    min_days: int
    max_days: Optional[int] = None
    unpaid_periods: int = 0
    unpaid_amount: float = 0.0


class AgingTotals(BaseModel):
    unpaid_periods: int = 0
    unpaid_amount: float = 0.0
    due_periods: int = 0
    overdue_periods: int = 0


class DelinquencyAgingReport(BaseModel):
    """Unpaid rent periods bucketed by days overdue"""
    buckets: List[DelinquencyBucket]
    totals: AgingTotals
    generated_at: datetime


class BuildingRollupRow(BaseModel):
    building: BuildingRef
    unpaid_periods: int = 0
    overdue_periods: int = 0
    due_periods: int = 0
    unpaid_amount: float = 0.0


class RollupTotals(BaseModel):
    buildings_with_unpaid: int = 0
    unpaid_periods: int = 0
    overdue_periods: int = 0
    due_periods: int = 0
    unpaid_amount: float = 0.0


class BuildingRollupsReport(BaseModel):
    """Buildings ranked by unpaid amount"""
    rows: List[BuildingRollupRow]
    totals: RollupTotals
    generated_at: datetime


class CollectionMetrics(BaseModel):
    total_due: float = 0.0
    total_collected: float = 0.0
    collection_rate: float = 0.0
    period_count: int = 0
    paid_period_count: int = 0


class DateRange(BaseModel):
    start_date: str
    end_date: str


class CollectionRateReport(BaseModel):
    """Due vs. collected for periods due inside a date window"""
    metrics: CollectionMetrics
    date_range: DateRange
    generated_at: datetime
