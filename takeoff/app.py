"""FastAPI application for the Takeoff extraction service."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .database import init_db
from .routers.documents import router as documents_router
from .routers.extraction import router as extraction_router
from .utils.logging import configure_logging


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    init_db()
    yield


app = FastAPI(title="Takeoff Construction Extraction", version=__version__, lifespan=lifespan)

app.include_router(documents_router)
app.include_router(extraction_router)


@app.get("/api/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
