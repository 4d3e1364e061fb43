"""Exception taxonomy for checkout and order reconciliation."""


class FotogiftyError(Exception):
    """Base exception carrying a stable error code and an error kind."""

    kind = "internal"
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.code = code or self.default_code
        self.message = message
        super().__init__(message)


class InvalidRequestError(FotogiftyError):
    """Raised when caller input is missing or malformed."""

    kind = "validation"
    default_code = "VALIDATION_ERROR"


class NotFoundError(FotogiftyError):
    """Raised when a user, address, package or order does not exist."""

    kind = "not_found"
    default_code = "NOT_FOUND"


class ConsistencyError(FotogiftyError):
    """Raised when a claimed cart amount disagrees with our records."""

    kind = "consistency"
    default_code = "CONSISTENCY_ERROR"


class UnauthorizedError(FotogiftyError):
    """Raised when the caller does not own the referenced resource."""

    kind = "unauthorized"
    default_code = "UNAUTHORIZED"


class GatewayError(FotogiftyError):
    """Raised when the payment provider call fails."""

    kind = "gateway"
    default_code = "GATEWAY_ERROR"


class InvalidSignatureError(FotogiftyError):
    """Raised when a webhook payload fails signature verification."""

    kind = "signature"
    default_code = "INVALID_SIGNATURE"


class MetadataError(FotogiftyError):
    """Raised when session metadata is absent or does not match the schema."""

    kind = "reconcile"
    default_code = "METADATA_INVALID"


class DuplicateOrderError(FotogiftyError):
    """Raised by the order store when a checkout session already has an order."""

    kind = "reconcile"
    default_code = "DUPLICATE_ORDER"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Order already exists for session {session_id}")
