"""Logging setup for the submission grader."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "submission_grader"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a rich console handler to the package logger.

    Meant for the CLI. Log records go to stderr so stdout carries only
    command output, such as the `--json` document. Services embedding the
    engine configure logging themselves. The handler is only added on the
    first call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)

    return logger
