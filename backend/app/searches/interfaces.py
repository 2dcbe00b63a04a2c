"""Search module interfaces (Interface Segregation Principle)."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from app.searches.schemas import PlatformName, PlatformStatus, SearchStatus


class ISearchRepository(ABC):
    """Interface for search data access."""

    @abstractmethod
    async def create(self, document: dict[str, Any]) -> dict[str, Any]:
        """Insert a search document (platform entries included)."""
        pass

    @abstractmethod
    async def get_by_id(self, search_id: str) -> dict[str, Any] | None:
        """Get a search by ID regardless of owner."""
        pass

    @abstractmethod
    async def get_for_user(self, search_id: str, user_id: str) -> dict[str, Any] | None:
        """Get a search only if it belongs to the user."""
        pass

    @abstractmethod
    async def list_for_user(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> list[dict[str, Any]]:
        """List a user's searches, newest first."""
        pass

    @abstractmethod
    async def delete(self, search_id: str) -> bool:
        """Delete a search document."""
        pass

    @abstractmethod
    async def set_website_info_once(self, search_id: str, website_info: Any) -> bool:
        """Store website info unless already set. Returns True if written."""
        pass

    @abstractmethod
    async def set_keywords_once(self, search_id: str, keywords: list[str]) -> bool:
        """Store keywords unless already set. Returns True if written."""
        pass

    @abstractmethod
    async def update_platform(
        self,
        search_id: str,
        platform: PlatformName,
        status: PlatformStatus | None = None,
        error_message: str | None = None,
        results_increment: int = 0,
        search_status: SearchStatus | None = None,
    ) -> bool:
        """Update one platform entry (and optionally the search status)."""
        pass

    @abstractmethod
    async def mark_failed(self, search_id: str, error_message: str) -> bool:
        """Mark the whole search as failed."""
        pass

    @abstractmethod
    async def set_status_if_version(
        self, search_id: str, expected_version: int, status: SearchStatus
    ) -> bool:
        """Compare-and-set the search status on its version counter."""
        pass

    @abstractmethod
    async def get_stats(self, user_id: str, month_start: datetime) -> dict[str, Any]:
        """Aggregate dashboard counters for a user."""
        pass


class IConversationRepository(ABC):
    """Interface for conversation data access."""

    @abstractmethod
    async def insert_many(self, documents: list[dict[str, Any]]) -> int:
        """Insert conversations. Returns the number inserted."""
        pass

    @abstractmethod
    async def list_for_search(self, search_id: str) -> list[dict[str, Any]]:
        """Conversations for a search, most relevant first."""
        pass

    @abstractmethod
    async def delete_for_search(self, search_id: str) -> int:
        """Delete every conversation of a search."""
        pass


class IWorkflowDispatcher(ABC):
    """Interface for triggering the external workflow engine."""

    @abstractmethod
    async def dispatch(
        self,
        search_id: str,
        product_url: str,
        user_id: str,
        platform: PlatformName,
    ) -> None:
        """Start the workflow for one platform. Raises WorkflowDispatchError."""
        pass
