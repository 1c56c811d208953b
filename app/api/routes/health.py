from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.lifecycle import AppServices, get_services

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(services: AppServices = Depends(get_services)) -> dict:
    """Liveness check, also reporting whether the background sweeper runs.

    Returns:
        dict: ``{"status": "ok", "sweeper": "running" | "stopped"}``.
    """

    return {
        "status": "ok",
        "sweeper": "running" if services.sweeper.running else "stopped",
    }
