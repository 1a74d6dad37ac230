"""bountyledger core - report lifecycle, reward schedule, and payouts."""

from .access import AccessControl
from .events import (
    BugReported,
    EventLog,
    FundsDeposited,
    LedgerEvent,
    ReportStatusUpdated,
    RewardPaid,
    RewardTierUpdated,
    ValidatorAdded,
    ValidatorRemoved,
)
from .exceptions import (
    AlreadyPaid,
    BountyLedgerException,
    ConfigException,
    InsufficientFunds,
    InvalidAmount,
    InvalidReportId,
    InvalidRewardAmount,
    InvalidSeverity,
    InvalidStatus,
    InvalidValidator,
    StateFileError,
    TransferFailed,
    Unauthorized,
)
from .funds import FundsPool, InMemoryTransferGateway, TransferGateway
from .ledger import BountyLedger
from .logging import configure_logging, correlation_context, ledger_fields
from .models import (
    UNIT,
    ZERO_ADDRESS,
    Report,
    ReportStatus,
    Severity,
    format_amount,
    parse_amount,
)
from .rewards import RewardSchedule, RewardTier
from .store import ReportStore

__all__ = [
    # Ledger
    "BountyLedger",
    "AccessControl",
    "RewardSchedule",
    "RewardTier",
    "ReportStore",
    "FundsPool",
    "TransferGateway",
    "InMemoryTransferGateway",
    # Models
    "Report",
    "ReportStatus",
    "Severity",
    "UNIT",
    "ZERO_ADDRESS",
    "parse_amount",
    "format_amount",
    # Events
    "EventLog",
    "LedgerEvent",
    "BugReported",
    "ReportStatusUpdated",
    "RewardPaid",
    "ValidatorAdded",
    "ValidatorRemoved",
    "RewardTierUpdated",
    "FundsDeposited",
    # Exceptions
    "BountyLedgerException",
    "Unauthorized",
    "InvalidSeverity",
    "InvalidReportId",
    "InvalidStatus",
    "AlreadyPaid",
    "InsufficientFunds",
    "InvalidValidator",
    "InvalidRewardAmount",
    "InvalidAmount",
    "TransferFailed",
    "ConfigException",
    "StateFileError",
    # Logging
    "configure_logging",
    "correlation_context",
    "ledger_fields",
]
