"""
공통 로깅 모듈

사용량 조회 Job과 집계 모듈에서 사용하는 공통 로거를 제공합니다.
설정에서 syslog를 켜면 `/dev/log` 소켓으로도 로그를 보냅니다.
"""

import logging
from datetime import datetime
from logging.handlers import SysLogHandler
from typing import Optional
from zoneinfo import ZoneInfo

from config.settings import LoggingSettings


LOGGER_NAME = "project_usage"


class ZoneFormatter(logging.Formatter):
    """
    로깅 시간을 지정한 타임존 기준으로 출력하는 Formatter.
    """

    def __init__(self, fmt=None, datefmt=None, tz: str = "UTC"):
        super().__init__(fmt, datefmt)
        self.tz = ZoneInfo(tz)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, self.tz)
        if datefmt:
            return dt.strftime(datefmt)
        # YYYY-MM-DD HH:MM:SS,mmm
        return dt.strftime("%Y-%m-%d %H:%M:%S,%f")[:-3]


def get_logger(
    name: str = LOGGER_NAME,
    settings: Optional[LoggingSettings] = None
) -> logging.Logger:
    """
    공통 로거를 반환합니다.

    - 처음 호출될 때만 핸들러를 구성하고, 이후에는 같은 로거를 그대로 반환합니다.
    - settings.syslog가 켜져 있으면 Syslog 핸들러를 시도합니다.
      /dev/log 가 없는 환경에서는 콘솔 출력만 동작합니다.
    """
    logger = logging.getLogger(name)

    # 이미 설정된 로거가 있으면 그대로 반환
    if logger.handlers:
        return logger

    settings = settings or LoggingSettings()
    logger.setLevel(getattr(logging, settings.level, logging.INFO))

    formatter = ZoneFormatter(
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
        tz=settings.timezone,
    )

    if settings.syslog:
        try:
            syslog_handler = SysLogHandler(address="/dev/log")
            syslog_handler.setFormatter(formatter)
            logger.addHandler(syslog_handler)
        except OSError:
            # /dev/log 가 없는 로컬 환경
            pass

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    return logger
