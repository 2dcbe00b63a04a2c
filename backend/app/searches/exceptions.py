"""Search module exceptions (Single Responsibility)."""


class SearchError(Exception):
    """Base exception for search operations."""

    def __init__(self, message: str = "Search error occurred"):
        self.message = message
        super().__init__(self.message)


class InvalidSearchRequestError(SearchError):
    """Raised when a search request fails validation."""

    def __init__(self, message: str):
        super().__init__(message)


class SearchNotFoundError(SearchError):
    """Raised when a search does not exist or is not owned by the caller."""

    def __init__(self, search_id: str):
        self.search_id = search_id
        super().__init__("Search not found")


class WorkflowDispatchError(SearchError):
    """Raised when the workflow engine could not be triggered for a platform."""

    def __init__(self, message: str = "Failed to trigger workflow"):
        super().__init__(message)


class WorkflowNotConfiguredError(WorkflowDispatchError):
    """Raised when no workflow URL is configured for a platform."""

    def __init__(self):
        super().__init__("Webhook URL not configured")
