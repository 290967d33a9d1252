"""Shared role and transaction type constants."""

ROLE_ADMIN = "admin"
ROLE_MANAGER = "warehouse_manager"
ROLE_VIEWER = "viewer"

ROLE_CHOICES = (ROLE_ADMIN, ROLE_MANAGER, ROLE_VIEWER)

# Roles allowed to change catalogue data, warehouses and stock.
WRITE_ROLES = frozenset({ROLE_ADMIN, ROLE_MANAGER})

TRANSACTION_INBOUND = "inbound"
TRANSACTION_OUTBOUND = "outbound"
TRANSACTION_TRANSFER = "transfer"
TRANSACTION_ADJUSTMENT = "adjustment"

TRANSACTION_TYPE_CHOICES = (
    TRANSACTION_INBOUND,
    TRANSACTION_OUTBOUND,
    TRANSACTION_TRANSFER,
    TRANSACTION_ADJUSTMENT,
)

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

TRANSACTION_STATUS_CHOICES = (STATUS_PENDING, STATUS_COMPLETED, STATUS_CANCELLED)


def normalize_transaction_type(value: str | None) -> str:
    """Return a lowercase transaction type, or an empty string when missing."""

    return (value or "").strip().lower()


def choice_pattern(choices: tuple[str, ...]) -> str:
    """Regex accepting exactly one of ``choices`` (used by pydantic ``Field``)."""

    return f"^({'|'.join(choices)})$"


__all__ = [
    "ROLE_ADMIN",
    "ROLE_CHOICES",
    "ROLE_MANAGER",
    "ROLE_VIEWER",
    "STATUS_CANCELLED",
    "STATUS_COMPLETED",
    "STATUS_PENDING",
    "TRANSACTION_ADJUSTMENT",
    "TRANSACTION_INBOUND",
    "TRANSACTION_OUTBOUND",
    "TRANSACTION_STATUS_CHOICES",
    "TRANSACTION_TRANSFER",
    "TRANSACTION_TYPE_CHOICES",
    "WRITE_ROLES",
    "choice_pattern",
    "normalize_transaction_type",
]
