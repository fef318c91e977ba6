"""StateLens — FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from statelens.api.routes import router
from statelens.config import load_settings
from statelens.controller import AppController

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    controller = getattr(app.state, "controller", None)
    if controller is None:
        controller = AppController(load_settings())
        app.state.controller = controller
    logger.info("Loading boundaries and metrics ...")
    await controller.refresh()
    logger.info("StateLens API is ready (%d regions).", len(controller.regions))
    yield
    controller.shutdown()
    logger.info("Shutting down StateLens API.")


app = FastAPI(
    title="StateLens",
    description=(
        "Click-to-select choropleth of a regional metric, kept in sync "
        "with the runtime filter of an embedded analytics panel."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/", tags=["Root"])
def root():
    return {
        "name": "StateLens",
        "version": "1.0.0",
        "docs": "/docs",
        "description": "Choropleth selection synced to an embedded panel filter",
    }
