"""Custom exception classes for threadinbox."""


class InboxError(Exception):
    """Base exception for threadinbox."""

    def __init__(self, code: str, message: str, details=None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(InboxError):
    """Argument or identifier validation failure."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details)


class PermissionDeniedError(InboxError):
    """No authenticated caller."""

    def __init__(self, message: str = "Authenticated user required"):
        super().__init__("PERMISSION_DENIED", message)


class EncodingError(InboxError):
    """A stored record could not be decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(
            "ENCODING_ERROR",
            f"error reading {path}: {reason}",
            details={"path": path},
        )
