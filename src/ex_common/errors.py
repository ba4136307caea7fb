"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Order creation / validation
  3xxx: Order lifecycle
  4xxx: Order lookup
  9xxx: System

Each error also carries an ``error_code`` / ``error_type`` pair that is
rendered into ``errors[].extensions`` of the response envelope.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        error_code: str = "internal",
        error_type: str = "internal",
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.error_code = error_code
        self.error_type = error_type
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401, "invalid_token", "auth")


# --- 2xxx: Order creation ---

class CurrencyError(AppError):
    def __init__(self, currency_code: str) -> None:
        super().__init__(
            2001,
            f"Currency not supported: {currency_code}",
            422,
            "currency_not_supported",
            "validation",
        )


class DuplicatePendingOrderError(AppError):
    def __init__(self, artwork_id: str, edition_set_id: str | None = None) -> None:
        item = artwork_id if edition_set_id is None else f"{artwork_id}/{edition_set_id}"
        super().__init__(
            2002,
            f"Existing pending order for {item}",
            409,
            "existing_pending_order",
            "validation",
        )


class EmptyOrderError(AppError):
    def __init__(self) -> None:
        super().__init__(2003, "Order requires at least one line item", 422, "no_line_items", "validation")


class TotalsMismatchError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2004, f"Order totals mismatch: {detail}", 422, "totals_mismatch", "validation")


# --- 3xxx: Order lifecycle ---

class StateError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3001, detail, 422, "invalid_state_transition", "processing")


class OrderConflictError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(
            3002,
            f"Order {order_id} was modified concurrently",
            409,
            "concurrent_update",
            "processing",
        )


# --- 4xxx: Order lookup ---
# NotFoundError and AuthorizationError must stay indistinguishable to callers:
# same message, status and extensions.

_NOT_FOUND_MESSAGE = "Order not found"


class NotFoundError(AppError):
    def __init__(self) -> None:
        super().__init__(4001, _NOT_FOUND_MESSAGE, 401, "not_found", "auth")


class AuthorizationError(AppError):
    def __init__(self) -> None:
        super().__init__(4001, _NOT_FOUND_MESSAGE, 401, "not_found", "auth")


class InvalidLookupError(AppError):
    def __init__(self) -> None:
        super().__init__(4002, "Exactly one of id or code is required", 400, "invalid_lookup", "validation")


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9001, detail, 500)
