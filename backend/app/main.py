"""
FastAPI app entrypoint.

Reservations over Zenchef: availability, search, create, update, cancel.
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from app.api.routes import reservations

logger = logging.getLogger(__name__)

app = FastAPI(title="Restaurant Reservations", version="0.1.0")

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for the admin console in production
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_cors_extra = os.getenv("CORS_ORIGINS", "")
if _cors_extra:
    _cors_origins.extend(o.strip() for o in _cors_extra.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reservations.router, prefix="/restaurants/{restaurant_id}", tags=["reservations"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Reservations API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
