"""
Teamprio API application.
"""
from fastapi import FastAPI

from . import __version__
from .feature_flags import configure_logging
from .prioritization.api import router as prioritization_router

configure_logging()

app = FastAPI(title="Teamprio - Cross-team Prioritization", version=__version__)
app.include_router(prioritization_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
