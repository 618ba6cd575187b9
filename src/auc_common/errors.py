"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Listing (validation, lookup)
  3xxx: Bid (business rule violations, never retried)
  9xxx: System (conflict, store, settlement)
"""


class AppError(Exception):
    """Base application error."""

    retryable: bool = False

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class BusinessRuleViolation(AppError):
    """A well-formed request refused by an auction rule (4xx, never retried)."""


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Admin account required", 403)


# --- 2xxx: Listing ---

class ListingNotFoundError(BusinessRuleViolation):
    def __init__(self, listing_id: str) -> None:
        super().__init__(2001, f"Listing not found: {listing_id}", 404)


class ListingValidationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2002, f"Invalid listing: {detail}", 422)


class CategoryNotFoundError(BusinessRuleViolation):
    def __init__(self, category_id: int) -> None:
        super().__init__(2003, f"Category not found: {category_id}", 404)


# --- 3xxx: Bid ---

class AuctionEndedError(BusinessRuleViolation):
    def __init__(self, listing_id: str, status: str) -> None:
        super().__init__(3001, f"Auction has ended: {listing_id} is {status}", 409)


class BidTooLowError(BusinessRuleViolation):
    def __init__(self, amount: int, current_price: int) -> None:
        super().__init__(
            3002,
            f"Bid must be higher than current price: bid {amount} cents, "
            f"current {current_price} cents",
            422,
        )


class SelfBidError(BusinessRuleViolation):
    def __init__(self) -> None:
        super().__init__(3003, "You cannot bid on your own listing", 422)


class InvalidBidAmountError(AppError):
    def __init__(self, amount: int) -> None:
        super().__init__(3004, f"Invalid bid amount: {amount}", 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class ConflictError(AppError):
    retryable = True

    def __init__(self, attempts: int) -> None:
        super().__init__(
            9003,
            f"Concurrent update conflict after {attempts} attempts, please retry",
            409,
        )


class StoreUnavailableError(AppError):
    def __init__(self, detail: str = "Store unavailable") -> None:
        super().__init__(9004, detail, 503)


class SettlementInconsistencyError(AppError):
    def __init__(self, listing_id: str, detail: str) -> None:
        super().__init__(9005, f"Settlement inconsistency on {listing_id}: {detail}", 500)
