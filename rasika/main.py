from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from rasika.api import router
from rasika.config.settings import settings
from rasika.db import ensure_indexes
from rasika.utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler: make sure the history/review indexes exist."""
    try:
        names = ensure_indexes()
        logger.info("MongoDB indexes ready: %s", names)
    except Exception as e:
        logger.warning("Failed to ensure MongoDB indexes at startup: %s", repr(e), exc_info=True)
    yield


app = FastAPI(title="Rasika", lifespan=lifespan)
app.include_router(router)


def run():
    """Serve the app with uvicorn on settings.HOST:settings.PORT."""
    logger.info("Starting uvicorn on %s:%s", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
