"""
Health checks - for load balancers, Kubernetes, and monitoring.
Challenge: Fast liveness; readiness reports whether any admin model is registered.
"""

from fastapi import APIRouter

from admin_panel.admin.registry import admin
from admin_panel.config import get_settings

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready():
    """Readiness: models registered and routable."""
    models = [item.alias for item in admin.all()]
    return {"status": "ready" if models else "starting", "models": models}
