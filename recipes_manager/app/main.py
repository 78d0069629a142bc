# recipes_manager/app/main.py
from __future__ import annotations

import logging
import sys
import time
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recipes_manager import __version__
from recipes_manager.app.config import settings
from recipes_manager.app.deps import get_repository
from recipes_manager.app.domain.errors import (
    InvalidRecipeError,
    PictureStorageError,
    RecipeRepositoryError,
)
from recipes_manager.app.routers.recipes import router as recipes_router
from recipes_manager.app.schemas.recipes import VersionResponse
from recipes_manager.app.services.seed import load_seed_file, seed_repository

API_VERSION = "v1"

# Plain stdout logging (fine for dev and containers)
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("recipes_manager")


@asynccontextmanager
async def lifespan(app: FastAPI):
    repo = get_repository()
    if settings.RECIPES_SEED_FILE:
        seed_repository(repo, load_seed_file(settings.RECIPES_SEED_FILE))
    yield


app = FastAPI(title="Recipes Manager API", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


@app.exception_handler(InvalidRecipeError)
async def invalid_recipe_handler(request: Request, exc: InvalidRecipeError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(RecipeRepositoryError)
async def repository_error_handler(request: Request, exc: RecipeRepositoryError) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Recipe storage unavailable"})


@app.exception_handler(PictureStorageError)
async def picture_error_handler(request: Request, exc: PictureStorageError) -> JSONResponse:
    logger.error("Picture storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Picture storage unavailable"})


api_v1 = APIRouter(prefix=f"/api/{API_VERSION}")
api_v1.include_router(recipes_router)
app.include_router(api_v1)


@app.get("/version", response_model=VersionResponse)
def version() -> VersionResponse:
    return VersionResponse(api=API_VERSION, app=__version__)


@app.get("/health")
def health():
    return {"ok": True}
