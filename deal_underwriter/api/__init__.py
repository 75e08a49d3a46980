"""
API routes for the underwriting engine.
"""

from fastapi import APIRouter

from deal_underwriter.api import calculations

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
