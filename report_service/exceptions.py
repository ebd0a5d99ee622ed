"""Custom exceptions for the report service.

Each exception carries the HTTP status code and the short ``error`` label
used in the JSON error body, so the application-level handler can turn
any of them into a response without knowing the concrete type.
"""


class ReportServiceError(Exception):
    """Base exception for the report service."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidReportError(ReportServiceError):
    """The submitted payload is not a usable report."""

    status_code = 400
    error = "Invalid report data"


class PayloadTooLargeError(ReportServiceError):
    """The request body exceeds the configured size limit."""

    status_code = 413
    error = "Payload Too Large"


class RenderError(ReportServiceError):
    """Browser launch, navigation or PDF export failed."""

    status_code = 500
    error = "Failed to generate PDF"


class DeliveryError(ReportServiceError):
    """The rendered PDF could not be persisted or sent."""

    status_code = 500
    error = "Failed to download PDF"


class RendererBusyError(ReportServiceError):
    """All browser slots are in use."""

    status_code = 503
    error = "Service Unavailable"
