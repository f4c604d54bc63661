"""
API entry point - vegepoly (vegetation point generation inside polygons).
Run: uvicorn main:app --reload --port 8000
"""
import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env from backend/, repo root or cwd so DATABASE_URL, EXPORT_DIR etc. are set
_backend_dir = Path(__file__).resolve().parent
load_dotenv(_backend_dir / ".env")
load_dotenv(_backend_dir.parent / ".env")
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vegepoly.api.settings import router as settings_router
from vegepoly.api.vegetation import router as vegetation_router
from vegepoly.config import load_app_settings
from vegepoly.services.jobs import VegetationJobManager

settings = load_app_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Vegepoly API",
    description="Backend API: Poisson-disc vegetation points inside polygons, progress, export, settings.",
    version="0.1.0",
)
app.state.settings = settings
app.state.jobs = VegetationJobManager()

# CORS: local browser clients on :3000 call this API on :8000.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(vegetation_router, prefix="/api/vegetation", tags=["vegetation"])
app.include_router(settings_router, prefix="/api/settings", tags=["settings"])


@app.get("/health")
def health():
    """Availability check (CI/CD, Docker)."""
    return {"status": "ok"}
