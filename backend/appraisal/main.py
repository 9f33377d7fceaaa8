from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from appraisal.api.v1.router import api_router
from appraisal.core.config import settings
from appraisal.core.cosmos import cosmos_store
from appraisal.core.errors import register_exception_handlers
from appraisal.services.employee_service import employee_service
from appraisal.services.form_service import form_service
from appraisal.services.response_service import response_service

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    try:
        await employee_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize EmployeeService — continuing without DB")
    try:
        await form_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize FormService — continuing without DB")
    try:
        await response_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize ResponseService — continuing without DB")
    yield
    await employee_service.close()
    await form_service.close()
    await response_service.close()
    await cosmos_store.close()


app = FastAPI(
    title="Appraisal Admin API",
    description="Employees, appraisal forms and submitted responses",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Appraisal Admin API"}
