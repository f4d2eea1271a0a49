#!/usr/bin/env python3
import logging

import uvicorn

from backoffice.config import get_settings

logger = logging.getLogger("backoffice")


if __name__ == "__main__":
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    logger.info("Starting API server on %s:%s", settings.HOST, settings.PORT)
    uvicorn.run("backoffice.main:app", host=settings.HOST, port=settings.PORT, reload=settings.RELOAD)
