"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.admin import router as admin_router
from api.v1.routes.auth import router as auth_router
from api.v1.routes.marketplace import router as marketplace_router
from api.v1.routes.profile import router as profile_router
from api.v1.routes.purchases import router as purchases_router
from api.v1.routes.seller import router as seller_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(profile_router)
router.include_router(marketplace_router)
router.include_router(purchases_router)
router.include_router(seller_router)
router.include_router(admin_router)
