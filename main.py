import json
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.logging import setup_logging
from db import AsyncSessionLocal, init_db
from core.deps import ACCOUNT_DISABLED_MESSAGE, AccountDisabledError
from api.auth.views import router as auth_router
from api.users.views import router as users_router
from api.users.views import admin_router as admin_users_router
from api.users.db_manager import seed_default_admin
from api.assets.views import router as assets_router
from api.dashboard.views import router as dashboard_router
from api.dashboard.views import assets_alias_router as dashboard_assets_alias_router

setup_logging()
logger = logging.getLogger(__name__)


def get_cors_origins() -> list[str]:
    """Get CORS origins from environment variable or use defaults."""
    cors_env = os.environ.get("CORS_ORIGINS", "")

    # Try to parse as JSON array
    if cors_env:
        try:
            origins = json.loads(cors_env)
            if isinstance(origins, list):
                return origins
        except json.JSONDecodeError:
            # If not valid JSON, treat as comma-separated
            return [o.strip() for o in cors_env.split(",") if o.strip()]

    # Default origins for local frontends
    return [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    async with AsyncSessionLocal() as session:
        await seed_default_admin(session)
    logger.info("Asset manager API started")
    yield


app = FastAPI(
    title="Enterprise Asset Manager API",
    description="API for tracking hardware and software assets, their assignment and depreciation",
    version="1.0.0",
    lifespan=lifespan,
)

# Get CORS origins from environment or use defaults
cors_origins = get_cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AccountDisabledError)
async def account_disabled_handler(request: Request, exc: AccountDisabledError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"error": ACCOUNT_DISABLED_MESSAGE},
    )


# Authentication and user endpoints
app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(admin_users_router, prefix="/api/v1")

# Business endpoints
app.include_router(dashboard_assets_alias_router, prefix="/api/v1")
app.include_router(assets_router, prefix="/api/v1")
app.include_router(dashboard_router, prefix="/api/v1")


# Health check endpoint
@app.get("/health", tags=["system"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
