from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from app.core.errors import install_error_handlers
from app.core.request_log import request_log_middleware
from app.db.base import Base
from app.db.session import engine

# Register models
from app.db import models  # noqa: F401

from services.wms.picking.api import router as pick_router
from services.wms.tasking.api import router as tasks_router
from services.wms.order_items.api import router as items_router
from services.wms.inventory_ops.api import router as inventory_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("pickflow")

CREATE_SCHEMA_ON_STARTUP = os.getenv("CREATE_SCHEMA_ON_STARTUP", "1") == "1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    if CREATE_SCHEMA_ON_STARTUP:
        # Dev-friendly schema creation (migrations are available for real upgrades)
        Base.metadata.create_all(bind=engine)
        logger.info("database schema ensured")
    yield


app = FastAPI(title="Pickflow Pick API", lifespan=lifespan)
install_error_handlers(app)

@app.middleware("http")
async def _request_log(request, call_next):
    return await request_log_middleware(request, call_next)

app.include_router(pick_router)
app.include_router(tasks_router)
app.include_router(items_router)
app.include_router(inventory_router)

@app.get("/health")
def health():
    return {"ok": True}
