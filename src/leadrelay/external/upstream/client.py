"""
Lead buyer REST API client
"""
import json
import httpx
from rich.markup import escape
from typing import Dict, Any, Optional
from leadrelay.core.config import UpstreamConfig
from leadrelay.external.upstream.models import UpstreamResult
from leadrelay.utils.logging import get_logger

logger = get_logger(__name__)


def parse_body(response: httpx.Response) -> Any:
    """Decode a JSON body, wrapping anything else as ``{"raw": text}``"""
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {"raw": response.text}


class UpstreamClient:
    """
    Client for the lead buyer API.
    Posts one lead per call and hands back the status and body untouched;
    deciding what the answer means is the relay's job.
    """

    def __init__(
        self,
        config: UpstreamConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = config.base_url
        self.lead_path = config.lead_path
        self.api_key = config.api_key
        self.api_secret = config.api_secret
        self.api_key_header = config.api_key_header
        self.api_secret_header = config.api_secret_header
        self.timeout = httpx.Timeout(config.timeout, connect=config.connect_timeout)
        self.transport = transport

    @property
    def lead_url(self) -> str:
        # Build URL - ensure no double slashes
        return f"{self.base_url.rstrip('/')}/{self.lead_path.lstrip('/')}"

    def _get_headers(self) -> Dict[str, str]:
        """Request headers carrying the key/secret pair"""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_key:
            headers[self.api_key_header] = self.api_key
        if self.api_secret:
            headers[self.api_secret_header] = self.api_secret
        return headers

    async def submit_lead(self, payload: Dict[str, Any]) -> UpstreamResult:
        """
        Post a normalized lead to the buyer.

        Args:
            payload: Outbound lead fields

        Returns:
            UpstreamResult with the HTTP status and parsed body

        Raises:
            httpx.HTTPError: If the request could not be completed (timeouts,
                connection failures). HTTP error statuses are not raised.
        """
        url = self.lead_url

        try:
            # Field names only; values include SSN and bank details
            logger.debug(f"[cyan]Posting lead to buyer:[/cyan] {escape(url)}")
            logger.debug(f"[dim]Fields:[/dim] {escape(str(sorted(payload)))}")

            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport
            ) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers=self._get_headers(),
                )

            logger.info(
                f"[green]Buyer responded:[/green] [yellow]{response.status_code}[/yellow]"
            )
            return UpstreamResult(status_code=response.status_code, body=parse_body(response))

        except httpx.TimeoutException as e:
            logger.error(f"[red]❌ Timed out posting lead to buyer:[/red] {escape(repr(e))}")
            raise
        except httpx.HTTPError as e:
            logger.error(f"[red]❌ HTTP error posting lead to buyer:[/red] {escape(repr(e))}")
            raise
