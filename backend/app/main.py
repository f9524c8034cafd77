"""
FastAPI application entry point.
"""

import logging

from fastapi import FastAPI

from app.api.v1 import anthropometry

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Anthropometry Engine API",
    description="Body-composition engine for clinical anthropometric evaluations",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI at /docs
    redoc_url="/redoc",  # ReDoc at /redoc
    openapi_url="/openapi.json",  # OpenAPI JSON schema
)

app.include_router(anthropometry.router, prefix="/api/v1", tags=["anthropometry"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Anthropometry Engine API"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok"}
