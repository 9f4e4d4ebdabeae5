"""
Request parameter parsing and validation.

Turns wire codes (``freq=q``, ``transform=yoy``, ``fill=ffill``) into enums
and checks paging bounds. Every failure is an InvalidParameterError with a
stable numeric code and a documentation link, raised before any I/O.

Error codes:
    1001  series id
    1002  frequency
    1003  transform
    1004  fill policy
    1005  page
    1006  page_size
    1007  output format
"""

from __future__ import annotations

import re
from enum import Enum
from typing import TypeVar

from tsengine.core.enums import FillPolicy, Frequency, OutputFormat, Transform
from tsengine.core.errors import InvalidParameterError

ERROR_DOCS_BASE = "https://developers.company.com/docs/errors/"

SERIES_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")

E = TypeVar("E", bound=Enum)


def invalid_parameter(message: str, error_code: int, parameter: str) -> InvalidParameterError:
    error = InvalidParameterError(
        message,
        error_code=error_code,
        more_info=f"{ERROR_DOCS_BASE}{error_code}",
    )
    error.with_context(parameter=parameter)
    return error


def _parse_enum(enum_cls: type[E], raw: str | E) -> E | None:
    if isinstance(raw, enum_cls):
        return raw
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    for member in enum_cls:
        if text.lower() in (member.value.lower(), member.name.lower()):
            return member
    return None


def _supported(enum_cls: type[Enum]) -> str:
    return ",".join(member.value for member in enum_cls)


def parse_frequency(raw: str | Frequency) -> Frequency:
    """Accepts codes (``native, D, W, M, Q, A``) or names (``monthly``), any case."""
    frequency = _parse_enum(Frequency, raw)
    if frequency is None:
        raise invalid_parameter(
            f"Invalid frequency code. Supported values: {_supported(Frequency)}.", 1002, "freq"
        )
    return frequency


def parse_transform(raw: str | Transform) -> Transform:
    transform = _parse_enum(Transform, raw)
    if transform is None:
        raise invalid_parameter(
            f"Invalid transform code. Supported values: {_supported(Transform)}.", 1003, "transform"
        )
    return transform


def parse_fill_policy(raw: str | FillPolicy) -> FillPolicy:
    policy = _parse_enum(FillPolicy, raw)
    if policy is None:
        raise invalid_parameter(
            f"Invalid fill policy. Supported values: {_supported(FillPolicy)}.", 1004, "fill"
        )
    return policy


def parse_format(raw: str | OutputFormat | None) -> OutputFormat:
    """Output format; ``None`` or empty means JSON."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return OutputFormat.JSON
    fmt = _parse_enum(OutputFormat, raw)
    if fmt is None:
        raise invalid_parameter(
            f"Invalid format value. Supported values: {_supported(OutputFormat)}.", 1007, "format"
        )
    return fmt


def validate_series_id(series_id: str) -> str:
    if not isinstance(series_id, str) or not SERIES_ID_PATTERN.fullmatch(series_id):
        raise invalid_parameter(
            "Invalid series id. Expected 1-64 characters from [A-Za-z0-9_.-].", 1001, "series_id"
        )
    return series_id


def validate_page(page: int) -> int:
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise invalid_parameter(
            "Invalid page parameter. Must be greater than or equal to 1.", 1005, "page"
        )
    return page


def validate_page_size(page_size: int, max_page_size: int) -> int:
    if isinstance(page_size, bool) or not isinstance(page_size, int) or not 1 <= page_size <= max_page_size:
        raise invalid_parameter(
            f"Invalid page_size parameter. Supported range: 1-{max_page_size}.", 1006, "page_size"
        )
    return page_size
