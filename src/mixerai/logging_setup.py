import logging
import os
from typing import Optional

# Client libraries that log every HTTP round trip at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "openai", "hpack")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Console logging for the API process.
    - Level comes from ``level``, else APP_LOG_LEVEL, else INFO.
    - Supabase/OpenAI transport loggers are capped at WARNING unless DEBUG
      was asked for.
    """
    level_name = (level or os.getenv("APP_LOG_LEVEL") or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level_value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if level_value > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(level_value, logging.WARNING))
