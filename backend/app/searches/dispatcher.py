"""n8n workflow dispatcher.

Each platform has its own workflow entry point. The dispatcher POSTs the
search parameters there with the shared secret; the workflow reports back
through the inbound webhook.
"""

import logging

import httpx

from app.config import Settings
from app.searches.exceptions import WorkflowDispatchError, WorkflowNotConfiguredError
from app.searches.interfaces import IWorkflowDispatcher
from app.searches.schemas import PlatformName

logger = logging.getLogger(__name__)


class N8nWorkflowDispatcher(IWorkflowDispatcher):
    """Triggers n8n workflows over HTTP."""

    SECRET_HEADER = "x-api-key"

    def __init__(
        self,
        webhook_urls: dict[str, str],
        secret: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            webhook_urls: Workflow URL per platform name
            secret: Shared secret sent in the x-api-key header
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self._webhook_urls = webhook_urls
        self._secret = secret
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "N8nWorkflowDispatcher":
        return cls(
            webhook_urls=settings.workflow_webhook_urls,
            secret=settings.n8n_webhook_secret,
            timeout=settings.n8n_request_timeout_seconds,
        )

    async def dispatch(
        self,
        search_id: str,
        product_url: str,
        user_id: str,
        platform: PlatformName,
    ) -> None:
        webhook_url = self._webhook_urls.get(platform.value)
        if not webhook_url:
            logger.warning(f"Webhook URL not configured for platform: {platform.value}")
            raise WorkflowNotConfiguredError()

        payload = {
            "searchId": search_id,
            "productUrl": product_url,
            "userId": user_id,
            "platform": platform.value.lower(),
        }

        logger.info(f"Sending workflow request for {platform.value} (search {search_id})")
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    webhook_url,
                    json=payload,
                    headers={self.SECRET_HEADER: self._secret},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Error sending to {platform.value} webhook: {e}")
            raise WorkflowDispatchError(f"Webhook request failed: {e}") from e

        if not response.is_success:
            logger.error(
                f"{platform.value} webhook returned {response.status_code}: {response.text[:200]}"
            )
            raise WorkflowDispatchError(
                f"Webhook failed with status: {response.status_code}"
            )

        logger.info(f"Successfully sent webhook to {platform.value}")
