from __future__ import annotations

import logging
import socket
import threading
from collections.abc import Mapping, Sequence
from logging import Handler
from typing import Any

from epub_metadata.service.logging.configuration import (
    LoggingConfiguration,
    LogLevel,
)
from epub_metadata.util.datetime_helpers import from_timestamp
from epub_metadata.util.json import json_serializer
from epub_metadata.util.xmlparser import RECOVERED_ERRORS_LOGGER


class JSONFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__()
        self.hostname = socket.getfqdn()
        self.main_thread_id = threading.main_thread().ident

    def format(self, record: logging.LogRecord) -> str:
        def ensure_str(s: Any) -> Any:
            """Ensure that unicode strings are used for a record's message.
            We don't want to try to interpolate an incompatible byte type; it
            could lead to a UnicodeDecodeError.
            """
            if isinstance(s, bytes):
                s = s.decode("utf-8")
            return s

        message = ensure_str(record.msg)
        if record.args:
            record_args: tuple[Any, ...] | dict[str, Any] | None = None
            if isinstance(record.args, Mapping):
                record_args = {
                    ensure_str(k): ensure_str(v) for k, v in record.args.items()
                }
            elif isinstance(record.args, Sequence):
                record_args = tuple(ensure_str(arg) for arg in record.args)

            if record_args is not None:
                try:
                    message = message % record_args
                except Exception as e:
                    # A problem with the logging code shouldn't break the code
                    # that actually does the work, but the bad message still
                    # needs to be reported so it can be fixed.
                    message = (
                        "Log message could not be formatted. Exception: %r. Original message: message=%r args=%r"
                        % (e, message, record_args)
                    )
        data = dict(
            host=self.hostname,
            name=record.name,
            level=record.levelname,
            filename=record.filename,
            message=message,
            timestamp=from_timestamp(record.created).isoformat(),
        )
        if record.exc_info:
            data["traceback"] = self.formatException(record.exc_info)
        if record.process:
            data["process"] = record.process
        if record.thread and record.thread != self.main_thread_id:
            data["thread"] = record.thread
        if record.stack_info:
            data["stack"] = self.formatStack(record.stack_info)

        return json_serializer(data)


def create_stream_handler(formatter: logging.Formatter) -> logging.Handler:
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    return stream_handler


def setup_logging(
    level: LogLevel,
    verbose_level: LogLevel,
    stream: Handler,
) -> None:
    # Set up the root logger
    logging.basicConfig(force=True, level=level.value, handlers=[stream])

    # The recovering XML parser reports every broken bit of markup it
    # works around, which is noise at our normal log level.
    RECOVERED_ERRORS_LOGGER.setLevel(verbose_level.value)


def setup_logging_from_configuration(
    config: LoggingConfiguration | None = None,
) -> None:
    """Configure the root logger from EPUB_METADATA_LOG_* environment settings."""
    if config is None:
        config = LoggingConfiguration()
    formatter = JSONFormatter() if config.json_format else logging.Formatter()
    setup_logging(
        level=config.level,
        verbose_level=config.verbose_level,
        stream=create_stream_handler(formatter),
    )
