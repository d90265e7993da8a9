"""HTTP routes."""

from fastapi import APIRouter

from mybank.api import account, auth, health

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(account.router, tags=["account"])
