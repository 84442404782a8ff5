"""
Structured logging configuration using structlog.

JSON output inside Lambda (CloudWatch friendly), readable colored console
output everywhere else.
"""

import logging
import sys
from typing import Any, cast

import structlog

# Third-party loggers that are chatty at INFO/DEBUG
NOISY_LOGGERS = ("boto3", "botocore", "urllib3", "httpx", "httpcore")


def configure_structlog(
    log_level: str = "INFO", json_logs: bool = False, include_stdlib_logs: bool = True
) -> None:
    """
    Configure structlog for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Whether to output logs in JSON format (useful for production)
        include_stdlib_logs: Whether to include standard library logs in structured format
    """
    timestamper = structlog.processors.TimeStamper(fmt="ISO")

    # Shared by structlog loggers and foreign stdlib records (boto3, httpx)
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        timestamper,
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        *shared_processors,
        structlog.dev.set_exc_info,
        structlog.processors.CallsiteParameterAdder(
            [
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
    ]

    if json_logs:
        processors.append(structlog.processors.format_exc_info)

    if include_stdlib_logs:
        # Rendering happens in the stdlib handler's formatter
        processors.append(structlog.stdlib.ProcessorFormatter.wrap_for_formatter)
    else:
        processors.append(renderer)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if include_stdlib_logs:
        formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger = logging.getLogger()
        # Lambda reuses the process between invocations; avoid stacking handlers
        for existing in list(root_logger.handlers):
            if isinstance(existing.formatter, structlog.stdlib.ProcessorFormatter):
                root_logger.removeHandler(existing)
        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a configured structlog logger.

    Args:
        name: Logger name (defaults to calling module)

    Returns:
        Configured structlog logger
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def configure_lambda_logging() -> None:
    """
    Configure structured logging for the AWS Lambda environment.
    Always JSON, and every line carries the function name, version and region.
    """
    from .settings import settings

    configure_structlog(
        log_level=settings.LOG_LEVEL,
        json_logs=True,
        include_stdlib_logs=True,
    )

    structlog.contextvars.bind_contextvars(
        lambda_function=settings.AWS_LAMBDA_FUNCTION_NAME,
        lambda_version=settings.AWS_LAMBDA_FUNCTION_VERSION,
        aws_region=settings.AWS_REGION,
    )


def configure_dev_logging() -> None:
    """Configure colored console logging for local development and tests."""
    from .settings import settings

    # Use DEBUG level for development, unless explicitly set
    log_level = settings.LOG_LEVEL if settings.LOG_LEVEL != "INFO" else "DEBUG"

    configure_structlog(
        log_level=log_level,
        json_logs=False,
        include_stdlib_logs=True,
    )


def auto_configure() -> None:
    """Automatically configure logging based on environment variables."""
    from .settings import settings

    if settings.IS_LAMBDA_ENV:
        configure_lambda_logging()
    else:
        configure_dev_logging()


# Initialize logging when module is imported
auto_configure()
