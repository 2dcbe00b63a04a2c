"""Webhook module exceptions (Single Responsibility)."""


class WebhookError(Exception):
    """Base exception for webhook processing."""

    def __init__(self, message: str = "Webhook error occurred"):
        self.message = message
        super().__init__(self.message)


class InvalidWebhookPayloadError(WebhookError):
    """Raised when a callback body is missing required data."""

    def __init__(self, message: str):
        super().__init__(message)


class UnknownStageError(InvalidWebhookPayloadError):
    """Raised when the callback stage is not recognized."""

    def __init__(self, stage: str | None):
        self.stage = stage
        super().__init__(f"Unknown stage: {stage}")


class UnknownPlatformError(InvalidWebhookPayloadError):
    """Raised when the callback names a platform this service does not track."""

    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"Unknown platform: {platform}")


class WebhookSearchNotFoundError(WebhookError):
    """Raised when the callback references a search that does not exist."""

    def __init__(self, search_id: str):
        self.search_id = search_id
        super().__init__("Search not found")
