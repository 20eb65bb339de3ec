# backend/stocktrail/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stocktrail.api.auth_routes import router as auth_router
from stocktrail.api.errors import register_exception_handlers
from stocktrail.api.routes import router as products_router
from stocktrail.core.config import settings
from stocktrail.core.database import init_db
from stocktrail.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    logger.info("StockTrail API starting (env=%s)", settings.app_env)
    init_db()
    yield
    logger.info("StockTrail API shutting down")


app = FastAPI(title="StockTrail API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(products_router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok"}
