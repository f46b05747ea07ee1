# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Structured logging for verification runs.

Every record carries an ``event`` name (``valuecheck.verifier.check``,
``valuecheck.verifier.violation`` and so on) and a ``context`` mapping that
starts with the class under verification.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
from collections.abc import Mapping, MutableMapping
from datetime import UTC, datetime
from typing import Any, Final, cast, override

__all__ = ["StructuredLogger", "configure_logging", "get_logger"]

LOG_LEVEL_ENV: Final = "VALUECHECK_LOG_LEVEL"
LOG_FORMAT_ENV: Final = "VALUECHECK_LOG_FORMAT"

_TEXT_FORMAT: Final = "%(asctime)s %(levelname)s %(name)s %(event)s %(message)s %(context)s"


class StructuredLogger(logging.LoggerAdapter[logging.Logger]):
    """Adapter requiring ``event=`` on every call and merging ``context=``."""

    def __init__(
        self,
        logger: logging.Logger,
        *,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(logger, dict(context or {}))

    @property
    def context(self) -> Mapping[str, object]:
        """Context attached to every record from this adapter."""
        return cast(Mapping[str, object], self.extra)

    @override
    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        event = kwargs.pop("event", None)
        if not isinstance(event, str):
            raise TypeError("valuecheck log records require an 'event' name.")
        inline = kwargs.pop("context", None)
        if inline is None:
            inline = {}
        elif not isinstance(inline, Mapping):
            raise TypeError("context must be a mapping when provided.")
        kwargs["extra"] = {
            "event": event,
            "context": {**self.context, **cast(Mapping[str, object], inline)},
        }
        return msg, kwargs


def get_logger(
    name: str,
    *,
    logger_override: logging.Logger | StructuredLogger | None = None,
    context: Mapping[str, object] | None = None,
) -> StructuredLogger:
    """Return a :class:`StructuredLogger` for ``name``.

    A caller-supplied ``logger_override`` replaces the named logger; when it is
    already structured, its context is kept underneath ``context``.
    """

    match logger_override:
        case StructuredLogger():
            return StructuredLogger(
                logger_override.logger,
                context={**logger_override.context, **(context or {})},
            )
        case logging.Logger():
            return StructuredLogger(logger_override, context=context)
        case _:
            return StructuredLogger(logging.getLogger(name), context=context)


def configure_logging(
    *,
    level: int | str | None = None,
    json_mode: bool | None = None,
    env: Mapping[str, str] | None = None,
    force: bool = False,
) -> None:
    """Send verifier records to stderr as text or JSON.

    ``level`` and ``json_mode`` default to ``VALUECHECK_LOG_LEVEL`` and
    ``VALUECHECK_LOG_FORMAT`` (``json`` selects JSON output). When the root
    logger already has handlers, for example under pytest, only its level
    changes unless ``force=True``.
    """

    env = os.environ if env is None else env
    resolved_level = _coerce_level(level or env.get(LOG_LEVEL_ENV))
    if json_mode is None:
        json_mode = env.get(LOG_FORMAT_ENV, "").lower() == "json"

    root = logging.getLogger()
    if root.handlers and not force:
        root.setLevel(resolved_level)
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {"format": _TEXT_FORMAT},
                "json": {"()": "valuecheck.logging._JsonFormatter"},
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "json" if json_mode else "text",
                }
            },
            "root": {"handlers": ["stderr"], "level": resolved_level},
        }
    )


class _JsonFormatter(logging.Formatter):
    """One compact JSON object per record."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", None),
            "message": record.getMessage(),
            "context": getattr(record, "context", {}),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=repr, separators=(",", ":"))


def _coerce_level(level: int | str | None) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    try:
        return logging.getLevelNamesMapping()[level.upper()]
    except KeyError:
        raise TypeError(f"Unknown log level: {level!r}") from None
