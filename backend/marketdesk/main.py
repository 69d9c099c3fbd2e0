import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api import api_router
from .config import settings
from .database import engine, Base
from . import models  # noqa: F401  (registers tables on Base.metadata)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

# Create tables on startup (no-op if they already exist; non-fatal so the
# server starts even if the DB is temporarily unreachable).
try:
    Base.metadata.create_all(bind=engine)
except Exception as exc:
    logger.warning("create_all skipped — DB not reachable at startup: %s", exc)

app = FastAPI(
    title="MarketDesk API",
    description="Back-office API for a multi-marketplace (Meesho, Flipkart, Amazon) retail operation",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok"}


def run() -> None:
    uvicorn.run("marketdesk.main:app", host=settings.api_host, port=settings.api_port)
