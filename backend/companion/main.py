# companion backend api
# fastapi app with async mongodb and a gemini-backed wellness companion

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from companion.config import settings
from companion.services.db import db
from companion.routers import companion

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: connect to mongodb. shutdown: close connection."""
    logger.info("Starting companion backend...")
    await db.connect()
    logger.info("Companion backend ready")
    yield
    logger.info("Shutting down companion backend...")
    await db.close()


app = FastAPI(
    title="Companion API",
    description="Context-aware support companion: mood responses, journal reflections, therapy-informed chat, check-ins",
    version="0.1.0",
    lifespan=lifespan,
)

# cors — allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(companion.router)


@app.get("/health")
async def health_check():
    """basic health check endpoint"""
    return {"status": "ok", "service": "companion-api"}
