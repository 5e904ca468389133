class ShareError(Exception):
    message = "Share error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class ShareValidationError(ShareError):
    message = "Validation error"


class ShareConversionError(ShareError):
    """The file could not be converted; the cause is chained, never exposed."""

    message = "Error converting file"
