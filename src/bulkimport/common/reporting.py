"""Structured run events on top of the standard logging module."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

NOTICE = logging.INFO


class _Params(dict[str, Any]):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render(template: str, params: dict[str, Any]) -> str:
    """Fill ``{name}`` placeholders, leaving unknown ones untouched."""

    try:
        return template.format_map(_Params(params))
    except (IndexError, ValueError):
        return template


@dataclass(slots=True)
class RunReporter:
    """Emit import events as ``{name}`` templates with named parameters.

    The rendered message goes to the wrapped logger; the raw template and the
    parameters travel on the record as ``report_event`` / ``report_params`` so a
    collector can consume them without parsing text.
    """

    logger: logging.Logger

    @classmethod
    def for_module(cls, name: str) -> RunReporter:
        return cls(logging.getLogger(name))

    def notice(self, template: str, **params: Any) -> None:
        self._emit(NOTICE, template, params)

    def warn(self, template: str, **params: Any) -> None:
        self._emit(logging.WARNING, template, params)

    def error(self, template: str, *, exc_info: BaseException | None = None, **params: Any) -> None:
        self._emit(logging.ERROR, template, params, exc_info=exc_info)

    def _emit(
        self,
        level: int,
        template: str,
        params: dict[str, Any],
        *,
        exc_info: BaseException | None = None,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(
            level,
            render(template, params),
            exc_info=exc_info,
            extra={"report_event": template, "report_params": dict(params)},
        )
