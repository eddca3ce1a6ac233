# sitelog/logging_config.py
import logging

from sitelog.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = None):
    """프로세스 시작 시 한 번 호출하여 루트 로거를 설정합니다."""
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=level or settings.log_level, format=LOG_FORMAT)
