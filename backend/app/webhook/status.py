"""Search status aggregation.

Each platform moves ``pending -> analyzing -> searching -> completed|failed``
as workflow callbacks arrive. Platforms finish independently, so the overall
search status is derived from all selected platforms once every one of them
is terminal.
"""

import logging
from typing import Any, Iterable

from app.searches.interfaces import ISearchRepository
from app.searches.schemas import PlatformStatus, SearchStatus

logger = logging.getLogger(__name__)


def _platform_status(entry: dict[str, Any]) -> PlatformStatus | None:
    try:
        return PlatformStatus(entry.get("status"))
    except ValueError:
        return None


def resolve_overall_status(platforms: Iterable[dict[str, Any]]) -> SearchStatus | None:
    """Final search status, or None while a selected platform is still running.

    ``complete`` when every selected platform is terminal and at least one
    completed; ``failed`` when all are terminal and none completed.
    """
    statuses = [_platform_status(p) for p in platforms if p.get("selected")]
    if not statuses:
        return None

    if not all(s is not None and s.is_terminal for s in statuses):
        return None

    if any(s is PlatformStatus.COMPLETED for s in statuses):
        return SearchStatus.COMPLETE
    return SearchStatus.FAILED


class StatusAggregator:
    """Writes the overall search status once all selected platforms finish."""

    MAX_ATTEMPTS = 5

    def __init__(self, repository: ISearchRepository) -> None:
        self._repository = repository

    async def reconcile(self, search_id: str) -> SearchStatus | None:
        """Re-read the platforms and store the final status if there is one.

        The write is a compare-and-set on the search version, so a platform
        update that lands between the read and the write forces a re-read
        instead of being overwritten by a stale decision.
        """
        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            search = await self._repository.get_by_id(search_id)
            if not search:
                return None

            platforms = (search.get("platforms") or {}).values()
            outcome = resolve_overall_status(platforms)
            if outcome is None:
                return None

            if await self._repository.set_status_if_version(
                search_id, search.get("version", 0), outcome
            ):
                logger.info(f"Search {search_id} finished with status '{outcome.value}'")
                return outcome

            logger.info(
                f"Search {search_id} changed during reconciliation, retrying "
                f"({attempt}/{self.MAX_ATTEMPTS})"
            )

        logger.warning(f"Gave up reconciling search {search_id} after {self.MAX_ATTEMPTS} attempts")
        return None
