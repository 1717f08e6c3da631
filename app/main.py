import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import DEFAULT_JWT_SECRET, settings
from app.database import create_tables, async_session
from app.seed import seed_data
from app.routers.auth import router as auth_router
from app.routers.vehicles import router as vehicles_router
from app.services.image_store import URL_PREFIX
from app.utils.exceptions import register_exception_handlers
from app.utils.response import success_response

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.jwt_secret_key == DEFAULT_JWT_SECRET:
        logger.warning("Using the default development JWT secret; set JWT_SECRET_KEY in production")
    await create_tables()
    if settings.seed_demo_data:
        async with async_session() as session:
            await seed_data(session)
    yield


app = FastAPI(
    title="Fleet Vehicle API",
    description="Backend API for fleet vehicle record management",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api")
app.include_router(vehicles_router, prefix="/api")

os.makedirs(settings.upload_dir, exist_ok=True)
app.mount(URL_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")


@app.get("/health")
async def health_check():
    return success_response(data={"service": "fleet-vehicle-api", "version": "0.1.0"})
