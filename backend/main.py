"""Market Report Studio - FastAPI Backend"""
import os
import sys

# Project root (parent of backend/) so "config", "backend", "database" resolve when running python backend/main.py
_project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

# Load .env from project root
_env_file = os.path.join(_project_root, ".env")
if os.path.isfile(_env_file):
    from dotenv import load_dotenv
    load_dotenv(_env_file)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager

from config.settings import Settings
from backend.routers import files, selection, customers, analysis
from backend.state import build_workspace
from database.connection import SessionLocal, init_db
from report_engine.store import SqlKeyValueStore

settings = Settings()
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s API", settings.APP_NAME)
    await init_db()
    app.state.workspace = build_workspace(settings, SqlKeyValueStore(SessionLocal))
    yield
    app.state.workspace.close()
    logger.info("Shutting down")


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Upload market reports and turn a selection of them into a structured market analysis",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(files.router, prefix=f"{settings.API_PREFIX}/files", tags=["files"])
app.include_router(selection.router, prefix=f"{settings.API_PREFIX}/selection", tags=["selection"])
app.include_router(customers.router, prefix=f"{settings.API_PREFIX}/customers", tags=["customers"])
app.include_router(analysis.router, prefix=f"{settings.API_PREFIX}/analysis", tags=["analysis"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "market-report-studio"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
