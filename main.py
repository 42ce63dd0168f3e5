from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from dotenv import load_dotenv

from api.routes import dashboard
from utils.logger import get_logger
from core.config import settings
from core.database import db_manager, initialize_database
from core.errors import register_exception_handlers

load_dotenv()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting admin-dashboard-backend")
    settings.validate()

    # Initialize database
    initialize_database()

    yield
    db_manager.dispose()
    logger.info("Shutting down admin-dashboard-backend")


app = FastAPI(
    title="Admin Dashboard Backend",
    description="Administrative API for the site's content collections and dashboard statistics",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "admin-dashboard-backend"}


@app.get("/api/health")
async def api_health_check():
    logger.info("Health check requested")
    return {
        "status": "OK",
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
