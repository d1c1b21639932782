from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.firebase import init_firebase
from app.core.database import database
from app.api.v1.router import api_router
from app import models  # noqa: F401  registers all tables on Base.metadata
import logging
import os

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def get_version() -> str:
    """Read version from VERSION file, fallback to default if not found."""
    version_file = os.path.join(os.path.dirname(os.path.dirname(__file__)), "VERSION")
    try:
        if os.path.exists(version_file):
            with open(version_file, "r") as f:
                version = f.read().strip()
                if version:
                    return version
    except OSError as e:
        logger.warning(f"Could not read VERSION file: {e}")
    return "0.1.0"


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_firebase()
    if database.configured:
        database.create_all()
    else:
        logger.warning("lifespan: DATABASE_URL not set, running without a store")
    yield
    database.dispose()


app = FastAPI(
    title="PostPlanner API",
    version=get_version(),
    debug=settings.debug,
    redirect_slashes=False,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.api_v1_str)


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "database": "configured" if database.configured else "unconfigured",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
