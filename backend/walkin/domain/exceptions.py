"""Domain-specific exceptions, framework-independent."""


class WalkinError(Exception):
    """Base class for every error the record flows surface to callers."""


# ── Token extraction ────────────────────────────────────────────────


class AuthenticationError(WalkinError):
    """Raised by the identity extractor when a token cannot be trusted."""

    reason = "invalid_token"


class MalformedTokenError(AuthenticationError):
    """The token is not a three-segment JWT with a JSON object payload."""

    reason = "malformed"


class TokenExpiredError(AuthenticationError):
    """The token's ``exp`` claim lies in the past."""

    reason = "expired"


class InvalidSignatureError(AuthenticationError):
    """The token signature does not match the configured secret."""

    reason = "invalid_signature"


# ── Service level ───────────────────────────────────────────────────


class UnauthorizedError(WalkinError):
    """Raised when the caller's bearer token is missing or rejected."""


class ForbiddenError(WalkinError):
    """Raised when a valid caller does not own the targeted record."""

    def __init__(self, record_id: int, action: str = "update"):
        self.record_id = record_id
        self.action = action
        super().__init__(f"You are not authorized to {action} this record")


class InvalidInputError(WalkinError):
    """Raised for malformed payloads, pagination values or missing locators."""


class RecordNotFoundError(WalkinError):
    """Raised when no record matches the given locator."""

    def __init__(self, locator: int | str):
        self.locator = locator
        super().__init__(f"Record '{locator}' not found")


class RecordConflictError(WalkinError):
    """Raised when a record changed between load and save."""

    def __init__(self, record_id: int, expected_version: int):
        self.record_id = record_id
        self.expected_version = expected_version
        super().__init__(
            f"Record {record_id} was modified concurrently (expected version {expected_version})"
        )


class StoreUnavailableError(WalkinError):
    """Raised when the backing database fails."""


class AttachmentWriteFailedError(WalkinError):
    """Raised when an uploaded attachment cannot be written to the media root."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Failed to save file '{filename}'")
