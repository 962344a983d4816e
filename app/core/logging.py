# app/core/logging.py

import logging

from app.core.configuration import Settings


def setup_logging(settings: Settings) -> None:
    """
    Root logger 설정 (lifespan에서 한 번 호출)
    """
    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)

    # force=True: uvicorn이 먼저 root logger를 설정하므로 덮어쓰기
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
