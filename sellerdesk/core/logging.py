# sellerdesk/core/logging.py
# -----------------------------------------------------------------------------
# Loguru logging setup
# - rotating file sink with backtraces
# - stderr sink at the configured level
# -----------------------------------------------------------------------------
import sys
from pathlib import Path

from loguru import logger

from sellerdesk.core.config import settings

LOG_DIR = Path(settings.LOG_DIR)
LOG_DIR.mkdir(exist_ok=True, parents=True)

logger.remove()  # drop the default handler
logger.add(sys.stderr, level=settings.LOG_LEVEL)
logger.add(
    LOG_DIR / "app.log",
    rotation="10 MB",
    retention=10,  # keep the last 10 rotated files
    enqueue=True,  # multiprocess safe
    backtrace=True,
    diagnose=settings.ENV == "dev",  # diagnose dumps local variables
    level=settings.LOG_LEVEL,
)
