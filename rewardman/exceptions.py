"""Rewardman exceptions."""


class RewardmanError(Exception):
    """
    Structured exception for ordering, ledger and redemption operations.

    Every failure carries a stable ``code`` so the API layer can render a
    message without inspecting internals. Subclasses set ``default_code``
    so they can be raised with keyword context only.

    Usage:
        try:
            ledger.debit("ACC-001", 300, LedgerReason.REDEMPTION)
        except InsufficientBalance as e:
            e.code                 # "INSUFFICIENT_BALANCE"
            e.data["available"]    # 0
    """

    default_code = "REWARDMAN_ERROR"

    _default_messages = {
        "REWARDMAN_ERROR": "Operation failed",
        "ACCOUNT_NOT_FOUND": "Account not found",
        "ACCOUNT_EXISTS": "Account already exists",
        "REFERRAL_CODE_NOT_FOUND": "Referral code not found",
        "ORDER_NOT_FOUND": "Order not found",
        "MENU_ITEM_NOT_FOUND": "Menu item not found",
        "MENU_ITEM_UNAVAILABLE": "Menu item is not available",
        "RESERVATION_NOT_FOUND": "Reservation not found",
        "ITEM_NOT_FOUND": "Redeemable item not found",
        "REDEMPTION_NOT_FOUND": "Redemption not found",
        "NOT_FOUND": "Not found",
        "INVALID_COORDINATE": "Invalid coordinate",
        "INVALID_ZONE": "Invalid geofence zone",
        "INVALID_TRANSITION": "Invalid status transition",
        "INSUFFICIENT_BALANCE": "Insufficient points balance",
        "ITEM_UNAVAILABLE": "Item is not available",
        "INVALID_RESERVATION_WINDOW": "Invalid reservation date, time or party size",
        "INVALID_AMOUNT": "Invalid amount",
        "INVALID_ORDER": "Order has no valid items",
        "INVALID_REASON": "Unknown ledger reason",
        "ADJUSTMENT_DESCRIPTION_REQUIRED": "Manual adjustments require a description",
        "LEDGER_CONFLICT": "Concurrent ledger update, try again",
        "LEDGER_IMMUTABLE": "Ledger entries cannot be modified or deleted",
    }

    def __init__(self, code: str | None = None, message: str | None = None, **data):
        self.code = code or self.default_code
        self.message = message or self._default_messages.get(self.code, self.code)
        self.data = data
        super().__init__(f"[{self.code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}


class InvalidCoordinate(RewardmanError):
    default_code = "INVALID_COORDINATE"


class InvalidTransition(RewardmanError):
    default_code = "INVALID_TRANSITION"


class InsufficientBalance(RewardmanError):
    default_code = "INSUFFICIENT_BALANCE"


class ItemUnavailable(RewardmanError):
    default_code = "ITEM_UNAVAILABLE"


class InvalidReservationWindow(RewardmanError):
    default_code = "INVALID_RESERVATION_WINDOW"


class NotFound(RewardmanError):
    default_code = "NOT_FOUND"


class InvalidAmount(RewardmanError):
    default_code = "INVALID_AMOUNT"


class LedgerConflict(RewardmanError):
    """Transient: concurrent writers kept colliding on the same account."""

    default_code = "LEDGER_CONFLICT"
