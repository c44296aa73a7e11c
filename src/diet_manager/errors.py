"""Exception types raised by the diet manager."""


class DietManagerError(Exception):
    """Base class for diet manager errors."""


class StorageError(DietManagerError):
    """Raised when a data file cannot be read or written."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class CorruptRecordError(DietManagerError):
    """Raised when a persisted record cannot be decoded at all."""

    def __init__(self, source: str, line_number: int, message: str) -> None:
        super().__init__(f"{source}:{line_number}: {message}")
        self.source = source
        self.line_number = line_number


class NotFoundError(DietManagerError):
    """Raised when a user, product or meal selection does not exist."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)
        self.message = message


class InvalidFieldError(DietManagerError):
    """Raised when a text field cannot be stored in a flat record."""

    def __init__(self, field_name: str, value: str) -> None:
        super().__init__(f"{field_name} contains a field or record separator")
        self.field_name = field_name
        self.value = value
