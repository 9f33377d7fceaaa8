from fastapi import APIRouter

from appraisal.api.v1.endpoints import employees, forms, health, responses

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router)
api_router.include_router(employees.router)
api_router.include_router(forms.router)
api_router.include_router(responses.router)
