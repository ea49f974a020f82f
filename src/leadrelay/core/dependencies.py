"""
Shared dependencies for FastAPI routes
"""
from functools import lru_cache

from leadrelay.core.config import settings
from leadrelay.external.upstream.client import UpstreamClient
from leadrelay.services.lead_service import LeadRelay
from leadrelay.services.token_service import TokenCodec


@lru_cache
def get_token_codec() -> TokenCodec:
    """Process-wide codec keyed with the configured secret"""
    return TokenCodec(
        settings.token.encryption_key,
        redirect_base_url=settings.token.redirect_base_url,
    )


def get_lead_relay() -> LeadRelay:
    """Lead relay wired to the configured buyer"""
    return LeadRelay(
        UpstreamClient(settings.upstream),
        config=settings.relay,
        codec=get_token_codec(),
    )
