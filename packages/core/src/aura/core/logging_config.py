"""structlog 配置模块

dev 模式：pretty print 可读输出
json 模式：结构化 JSON 输出，便于定时任务（refresh-statuses）收集日志
"""

import logging
import os

import structlog

# 第三方库日志最低级别：aiosqlite 在 DEBUG 下会记录每一次数据库调用
_THIRD_PARTY_LEVELS: dict[str, int] = {
    "aiosqlite": logging.INFO,
}


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 配置

    Args:
        log_format: "json" 或 "dev"，缺省时读取 AURA_LOG_FORMAT（默认 dev）
        log_level: 日志级别名称，缺省时读取 AURA_LOG_LEVEL（默认 INFO），
            无法识别时使用 INFO
    """
    if log_format is None:
        log_format = os.environ.get("AURA_LOG_FORMAT", "dev")
    if log_level is None:
        log_level = os.environ.get("AURA_LOG_LEVEL", "INFO")
    level = _resolve_level(log_level)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format.strip().lower() == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(
            ensure_ascii=False
        )
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name, floor in _THIRD_PARTY_LEVELS.items():
        logging.getLogger(name).setLevel(max(level, floor))
