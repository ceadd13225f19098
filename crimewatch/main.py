from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from crimewatch.api.v1.router import api_router
from crimewatch.core.config import settings
from crimewatch.core.errors import CrimeWatchError, ServiceUnavailableError
from crimewatch.core.logging import configure_logging
from crimewatch.db.init_db import init_db

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    yield

app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG, lifespan=lifespan)

allow_origins = settings.CORS_ORIGINS
allow_credentials = '*' not in allow_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.exception_handler(CrimeWatchError)
async def crimewatch_error_handler(request: Request, exc: CrimeWatchError) -> JSONResponse:
    if isinstance(exc, ServiceUnavailableError):
        logger.warning('request.service_unavailable', path=request.url.path, error=exc.detail)
        return JSONResponse(status_code=exc.status_code, content={'detail': exc.public_detail})
    return JSONResponse(status_code=exc.status_code, content={'detail': exc.detail})


app.include_router(api_router)
