"""
Main API router
"""
from fastapi import APIRouter

from leadrelay.api.endpoints import lead, redirect

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(lead.router, tags=["leads"])
api_router.include_router(redirect.token_router, tags=["tokens"])
