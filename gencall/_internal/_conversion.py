# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

"""Best-effort value conversion used by the coercion phase.

Conversion follows pydantic's lax validation rules (``"5"`` converts to
``5``, ``["1", "2"]`` to ``list[int]`` etc.).  A conversion either
succeeds and produces a new value, or fails as a whole.
"""

from typing import Any

import logging

import pydantic
import pydantic_core

from ._utils import type_repr


logger = logging.getLogger("gencall.conversion")

_CONFIG = pydantic.ConfigDict(
    arbitrary_types_allowed=True,
    coerce_numbers_to_str=True,
)


def _type_adapter(tp: Any) -> pydantic.TypeAdapter[Any]:
    try:
        return pydantic.TypeAdapter(tp, config=_CONFIG)
    except pydantic.PydanticUserError as e:
        if e.code != "type-adapter-config-unused":
            raise
        # Models, dataclasses and TypedDicts carry their own config.
        return pydantic.TypeAdapter(tp)


def try_convert(value: Any, tp: Any) -> tuple[bool, Any]:
    """Convert *value* to *tp*.

    Returns ``(True, converted)`` on success and ``(False, None)`` if
    the value cannot be converted or *tp* is not something pydantic can
    validate.
    """
    try:
        adapter = _type_adapter(tp)
    except (
        pydantic.PydanticSchemaGenerationError,
        pydantic_core.SchemaError,
    ) as e:
        logger.debug("no conversion schema for %s: %s", type_repr(tp), e)
        return False, None

    try:
        converted = adapter.validate_python(value, strict=False)
    except pydantic.ValidationError as e:
        logger.debug(
            "cannot convert %r to %s: %d error(s)",
            value,
            type_repr(tp),
            e.error_count(),
        )
        return False, None
    except TypeError as e:
        # Raised by isinstance() checks on types it cannot handle.
        logger.debug("cannot convert %r to %s: %s", value, type_repr(tp), e)
        return False, None

    return True, converted
