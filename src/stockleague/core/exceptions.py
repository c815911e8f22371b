"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class InsufficientSharesError(AppError):
    """Raised when attempting to sell more shares than owned."""

    def __init__(self, symbol: str, available: int):
        super().__init__(
            f"Insufficient shares. You own {available} shares of {symbol}",
            code="INSUFFICIENT_SHARES",
        )


class InsufficientCashError(AppError):
    """Raised when a purchase costs more than the available cash."""

    def __init__(self, available: str, required: str):
        super().__init__(
            f"Insufficient cash. Available: ${available}, Required: ${required}",
            code="INSUFFICIENT_CASH",
        )


class TradePolicyError(AppError):
    """Raised when a trade breaks a configured league rule."""

    def __init__(self, message: str):
        super().__init__(message, code="TRADE_POLICY")


class AuthenticationError(AppError):
    """Raised when a player credential does not match."""

    def __init__(self, message: str = "Current password is incorrect"):
        super().__init__(message, code="AUTHENTICATION_FAILED")


class PersistenceError(AppError):
    """Raised when the storage backend fails to read or write a record."""

    def __init__(self, operation: str, partition: str, key: str, cause: Exception):
        self.cause = cause
        super().__init__(
            f"Storage {operation} failed for {partition}/{key}: {cause}",
            code="PERSISTENCE_ERROR",
        )
