"""
Lead relay service: validate, normalize, forward, map the buyer's answer
"""
import asyncio
import random
from typing import Any, Optional, Union

from rich.markup import escape

from leadrelay.core.config import RelayConfig
from leadrelay.external.upstream.client import UpstreamClient
from leadrelay.external.upstream.models import UpstreamResult
from leadrelay.schemas.lead import normalize_lead, validate_lead
from leadrelay.schemas.outcomes import AcceptedOutcome, RejectedOutcome
from leadrelay.services.token_service import TokenCodec
from leadrelay.utils.exceptions import UpstreamError
from leadrelay.utils.logging import get_logger

logger = get_logger(__name__)

RelayOutcome = Union[AcceptedOutcome, RejectedOutcome]


class LeadRelay:
    """
    Relays one web form submission to the lead buyer.
    Holds no per-request state; one instance can serve every request.
    """

    def __init__(
        self,
        client: UpstreamClient,
        config: Optional[RelayConfig] = None,
        codec: Optional[TokenCodec] = None
    ):
        self.client = client
        self.config = config or RelayConfig()
        self.codec = codec
        if self.config.mask_redirect_url and codec is None:
            raise ValueError("mask_redirect_url requires a token codec")

    async def relay(self, payload: Any) -> RelayOutcome:
        """
        Validate and forward a submission.

        Args:
            payload: Decoded JSON body from the form

        Returns:
            AcceptedOutcome or RejectedOutcome

        Raises:
            LeadValidationError: Before any outbound call when the payload is invalid
            UpstreamError: When the buyer's answer is not a recognised decision
            httpx.HTTPError: When the buyer could not be reached
        """
        await self._throttle()

        submission = validate_lead(payload)
        outbound = normalize_lead(submission)
        logger.info(
            f"[cyan]Relaying lead[/cyan] campaign=[yellow]{submission.campaignID}[/yellow] "
            f"fields={len(outbound)}"
        )

        result = await self.client.submit_lead(outbound)
        return self.map_result(result)

    def map_result(self, result: UpstreamResult) -> RelayOutcome:
        """Translate the buyer's status into the UI-facing outcome"""
        if result.status_code == 200 and result.decision == "ACCEPTED":
            redirect_url = result.body.get("redirectUrl")
            if self.config.mask_redirect_url and isinstance(redirect_url, str):
                redirect_url = self.codec.build_redirect_url(redirect_url)
            price = result.body.get("price")
            logger.info(f"[green]✅ Lead accepted[/green] price={escape(repr(price))}")
            return AcceptedOutcome(redirectUrl=redirect_url, price=price)

        if result.status_code == 200 and result.decision == "REJECTED":
            logger.info("[yellow]Lead rejected by buyer[/yellow]")
            message = result.body.get("message")
            return RejectedOutcome(message="rejected" if message is None else message)

        logger.warning(
            f"[red]Unrecognised buyer response:[/red] "
            f"[yellow]{result.status_code}[/yellow] status={escape(repr(result.decision))}"
        )
        raise UpstreamError(result.status_code, result.body)

    async def _throttle(self) -> None:
        low = self.config.delay_min_seconds
        high = self.config.delay_max_seconds
        if high <= 0:
            return
        await asyncio.sleep(random.uniform(low, high))
