from .interfaces import ConversionJob


class ConversionGatewayError(Exception):
    """Raised by gateway adapters when the provider call itself fails."""


class ConversionError(Exception):
    pass


class ConversionFailed(ConversionError):
    """The provider reported a terminal ERROR state for the job."""

    def __init__(self, message: str, job: ConversionJob | None = None) -> None:
        super().__init__(message)
        self.job = job


class ConversionTimedOut(ConversionError):
    """The deadline passed while the job was still pending."""

    def __init__(self, message: str, conversion_id: str | None = None) -> None:
        super().__init__(message)
        self.conversion_id = conversion_id


class ConversionUnavailable(ConversionError):
    """Submitting or polling the job failed at the transport or provider level."""
