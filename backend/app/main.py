from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.database import connect_to_mongo, close_mongo_connection, ensure_indexes, get_database
from app.auth.router import router as auth_router
from app.searches.router import router as search_router
from app.webhook.router import router as webhook_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - connect/disconnect from MongoDB."""
    # Startup
    await connect_to_mongo()

    try:
        await ensure_indexes(get_database())
    except Exception as e:
        logger.warning(f"Index creation failed (non-fatal): {e}")

    if not settings.n8n_webhook_secret:
        logger.warning("N8N_WEBHOOK_SECRET is not set; workflow callbacks will be rejected")

    yield

    # Shutdown
    await close_mongo_connection()


app = FastAPI(title="LeadScout API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(search_router)
app.include_router(webhook_router)


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
