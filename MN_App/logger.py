import json
import logging
import sys
from typing import Any, Dict

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if hasattr(record, "extra") and isinstance(record.extra, dict):
            payload.update(record.extra)
        return json.dumps(payload, ensure_ascii=False)


def setup_logger(name: str = "MN_App", level: int | str = logging.INFO, json_output: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the named package logger.

    Calling it again only updates the level and formatter, so repeated CLI
    invocations inside one process do not stack handlers.
    """
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    formatter: logging.Formatter = JsonFormatter() if json_output else logging.Formatter(TEXT_FORMAT)
    if logger.handlers:
        for handler in logger.handlers:
            handler.setFormatter(formatter)
        return logger
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


PACKAGE_LOGGERS = ("MN_Address", "MN_Account", "MN_Genesis", "MN_App")


def setup_logging(level: int | str = logging.INFO, json_output: bool = False) -> None:
    for name in PACKAGE_LOGGERS:
        setup_logger(name, level=level, json_output=json_output)
