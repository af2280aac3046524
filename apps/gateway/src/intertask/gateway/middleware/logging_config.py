"""节点日志配置

structlog 事件经 stdlib logging 统一输出，每条日志都带上本节点的 node_id，
多个节点的日志汇总后仍可区分来源。

INTERTASK_LOG_FORMAT: dev（默认，控制台可读输出）| json（结构化输出）
INTERTASK_LOG_LEVEL: 根 logger 级别，默认 INFO
LOGFIRE_SEND_TO_LOGFIRE: true 时启用 Logfire APM，失败降级为纯本地日志
"""

import logging
import os

import structlog
from fastapi import FastAPI
from intertask.core.config import get_node_id


def node_context(node_id: str) -> structlog.types.Processor:
    """返回为每条事件补上 node_id 的处理器"""

    def _add_node_id(logger, method_name, event_dict):
        event_dict.setdefault("node_id", node_id)
        return event_dict

    return _add_node_id


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer()


def setup_logging(node_id: str | None = None) -> None:
    """配置 structlog + stdlib logging

    Args:
        node_id: 本节点标识，缺省取 INTERTASK_NODE_ID
    """
    node_id = node_id or get_node_id()
    log_format = os.environ.get("INTERTASK_LOG_FORMAT", "dev")
    log_level = os.environ.get("INTERTASK_LOG_LEVEL", "INFO")

    # structlog 事件与第三方库的 stdlib 日志共用同一条前置链
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        node_context(node_id),
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def setup_logfire(app: FastAPI) -> None:
    """按需接入 Logfire，未开启或初始化失败时只保留本地日志"""
    if os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() != "true":
        return
    try:
        import logfire

        logfire.configure(service_name=f"intertask-{get_node_id()}")
        logfire.instrument_fastapi(app)
    except Exception as e:
        structlog.get_logger().warning("logfire_init_failed", error=str(e))
