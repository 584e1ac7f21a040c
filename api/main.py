"""
FastAPI application for the Crisp Interview Assistant.
Provides API endpoints for the interviewee and interviewer clients.

Run with: uvicorn api.main:app --reload --port 8000
"""
from contextlib import asynccontextmanager
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS, setup_logging
from api.dependencies import timers
from api.routes.ai import router as ai_router
from api.routes.files import router as files_router
from api.routes.interview import router as interview_router

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    timers.cancel_all()


app = FastAPI(
    title="Crisp Interview API",
    description="API for the AI-powered interview assistant",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for the web clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(interview_router)
app.include_router(ai_router)
app.include_router(files_router)


@app.get("/")
async def root():
    return {"status": "ok", "service": "Crisp Interview API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
