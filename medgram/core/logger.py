import logging
import sys
import time
from pathlib import Path
from uuid import uuid4
from logging.handlers import TimedRotatingFileHandler

import structlog
from structlog.dev import ConsoleRenderer
from fastapi import FastAPI, Request


SLOW_REQUEST_MS = 1000


SHARED = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def _json_formatter() -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ],
        foreign_pre_chain=SHARED,
    )


def configure_logging(log_dir: str | None = "logs", debug: bool = False):
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)

    #
    # CONSOLE
    #
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            ConsoleRenderer(),
        ],
        foreign_pre_chain=SHARED,
    ))
    root.addHandler(console)

    if log_dir:
        logs_dir = Path(log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        #
        # daily.log (INFO + WARNING)
        #
        daily = TimedRotatingFileHandler(
            str(logs_dir / "daily.log"),
            when="midnight",
            backupCount=7,
            encoding="utf-8",
        )
        daily.setLevel(logging.INFO)
        daily.addFilter(lambda record: record.levelno < logging.ERROR)
        daily.setFormatter(_json_formatter())
        root.addHandler(daily)

        #
        # errors.log (ERROR + CRITICAL)
        #
        errors = TimedRotatingFileHandler(
            str(logs_dir / "errors.log"),
            when="midnight",
            backupCount=30,
            encoding="utf-8",
        )
        errors.setLevel(logging.ERROR)
        errors.addFilter(lambda record: record.levelno >= logging.ERROR)
        errors.setFormatter(_json_formatter())
        root.addHandler(errors)

    #
    # Structlog config
    #
    structlog.configure(
        processors=[
            *SHARED,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger("medgram")
reqlog = structlog.get_logger("medgram.requests")


async def logging_middleware(request: Request, call_next):
    start = time.perf_counter()
    req_id = request.headers.get("X-Request-ID") or uuid4().hex

    log = reqlog.bind(
        request_id=req_id,
        method=request.method,
        path=request.url.path,
        client=request.client.host if request.client else None,
    )

    try:
        response = await call_next(request)
        ms = round((time.perf_counter() - start) * 1000, 2)

        if response.status_code >= 500:
            log.error("request_failed", status=response.status_code, ms=ms)
        elif response.status_code >= 400:
            log.warning("request_client_error", status=response.status_code, ms=ms)
        elif ms >= SLOW_REQUEST_MS:
            log.warning("request_slow", ms=ms)

        response.headers["X-Request-ID"] = req_id
        return response

    except Exception:
        ms = round((time.perf_counter() - start) * 1000, 2)
        log.error("request_crashed", ms=ms, exc_info=True)
        raise


def register_logger(app: FastAPI):
    app.middleware("http")(logging_middleware)
