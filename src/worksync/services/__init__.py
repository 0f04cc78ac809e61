"""WorkSync services."""

from worksync.services.ledger_service import LedgerService, SalaryPoint
from worksync.services.locking_service import EmployeeLocks
from worksync.services.owed_calculator import OwedCalculator, OwedSnapshot, compute_snapshot
from worksync.services.payment_processor import PaymentProcessor
from worksync.services.state_machine import PaymentStateMachine, PaymentStatus
from worksync.services.worksheet_service import WorksheetService

__all__ = [
    "EmployeeLocks",
    "LedgerService",
    "OwedCalculator",
    "OwedSnapshot",
    "PaymentProcessor",
    "PaymentStateMachine",
    "PaymentStatus",
    "SalaryPoint",
    "WorksheetService",
    "compute_snapshot",
]
