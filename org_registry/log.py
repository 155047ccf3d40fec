import logging
import sys

import structlog

_configured = False


def setup_logging(level: str = "INFO", json: bool = False):
    """
    structlog와 표준 logging을 한 번만 설정합니다.

    Args:
        level: 로그 레벨 이름 (예: "DEBUG", "INFO"). 대소문자 구분 없음.
        json: True이면 JSON 한 줄 형식으로, False이면 콘솔 형식으로 출력합니다.
    """
    global _configured
    if _configured:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def bind_request_context(**values):
    """요청 단위 컨텍스트(request_id 등)를 이후 모든 로그에 포함시킵니다."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context():
    structlog.contextvars.clear_contextvars()
