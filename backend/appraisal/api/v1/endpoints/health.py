from __future__ import annotations

from fastapi import APIRouter

from appraisal.core.config import settings
from appraisal.services.employee_service import employee_service
from appraisal.services.form_service import form_service

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    services: dict[str, str] = {}

    for name, service in (("employees", employee_service), ("forms", form_service)):
        try:
            if service.initialized:
                ok = await service.check_connection()
                services[name] = "ok" if ok else "error"
            else:
                services[name] = "not_configured"
        except Exception:
            services[name] = "error"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
