from enum import Enum


class RentPeriodStatus(str, Enum):
    DUE = "DUE"
    OVERDUE = "OVERDUE"
    PAID = "PAID"


UNPAID_STATUSES = (RentPeriodStatus.DUE, RentPeriodStatus.OVERDUE)
