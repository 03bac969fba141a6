"""API router aggregating all v1 routes."""

from __future__ import annotations

from fastapi import APIRouter

from .auth import router as auth_router
from .availability import router as availability_router
from .doctors import router as doctors_router
from .otp import router as otp_router
from .products import router as products_router
from .revalidate import router as revalidate_router

router = APIRouter(prefix="/api/v1")

router.include_router(auth_router)
router.include_router(otp_router)
router.include_router(doctors_router)
router.include_router(availability_router)
router.include_router(products_router)
router.include_router(revalidate_router)
