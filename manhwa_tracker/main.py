import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from manhwa_tracker.api.deps import init_state
from manhwa_tracker.config import get_settings

# Routers
from manhwa_tracker.api.routers.core import router as core_router
from manhwa_tracker.api.routers.updates import router as updates_router


settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
)
logger = logging.getLogger("manhwa_tracker")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the spider/cache pair on startup and close the HTTP client on shutdown."""
    init_state(app, get_settings())
    try:
        yield
    finally:
        spider = getattr(app.state, "spider", None)
        if spider is not None:
            await spider.aclose()


app = FastAPI(title="Manhwa Tracker", version="0.1", lifespan=lifespan)

app.include_router(core_router)
app.include_router(updates_router)
