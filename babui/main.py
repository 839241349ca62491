from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from babui.api.errors import register_error_handlers
from babui.api.routes import auth, chats, geo, locations, profile, properties
from babui.config import get_settings
from babui.context import AppContext
from babui.db.client import create_realtime_client
from babui.logging import setup_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings = get_settings()
    setup_logging(settings.log_level, json=settings.log_json)
    logger.info("Starting Babui...")

    ctx = AppContext.from_settings(settings)
    ctx.realtime = await create_realtime_client()
    app.state.context = ctx
    yield
    # Shutdown
    await ctx.realtime.remove_all_channels()
    logger.info("Shutting down Babui...")


app = FastAPI(
    title="Babui",
    description="Rental property marketplace for Bangladesh",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routes
app.include_router(locations.router)
app.include_router(properties.router)
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(chats.router)
app.include_router(geo.router)


@app.get("/")
async def root():
    return {"message": "Babui API", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("babui.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)
