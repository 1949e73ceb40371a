from loguru import logger
import sys
import os

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {module}:{function}:{line} | {message}"


def configure_logging(level="INFO", log_dir=None):
    logger.remove()
    logger.add(sys.stdout, level=level)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(
            os.path.join(log_dir, "app.log"),
            rotation="1 MB",
            retention="7 days",
            level=level,
            format=LOG_FORMAT
        )
    return logger
