from fastapi import APIRouter
from crimewatch.api.v1 import health, auth, reports, stats
from crimewatch.core.config import settings

api_router = APIRouter(prefix=settings.API_V1_PREFIX)

api_router.include_router(health.router, tags=['health'])
api_router.include_router(auth.router)
api_router.include_router(reports.router)
api_router.include_router(stats.router)
