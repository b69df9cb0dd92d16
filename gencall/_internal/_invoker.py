# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

"""Invocation of resolved generic methods."""

from __future__ import annotations
from typing import (
    TYPE_CHECKING,
    Any,
    Generic,
    Protocol,
    TypeVar,
    runtime_checkable,
)

import dataclasses
import logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from ._catalog import ConcreteMethod


logger = logging.getLogger("gencall.invoker")

_T_co = TypeVar("_T_co", covariant=True)


@runtime_checkable
class SupportsUnwrap(Protocol):
    """A wrapper layer a scripting front end puts around a value."""

    def __gencall_unwrap__(self) -> Any: ...


@dataclasses.dataclass(frozen=True)
class Wrapped(Generic[_T_co]):
    """Generic wrapper around an argument value.

    Wrappers are stripped right before the call, so the method always
    receives the underlying value.  Resolution does not look inside
    wrappers: a wrapped argument is matched as the wrapper itself, so
    it is only accepted by parameters typed ``Any`` or ``object`` (or
    a type pydantic can convert the wrapper to).  Unwrap arguments
    before resolving, and wrap them only for the call, when they have
    to match a concrete parameter type.
    """

    value: _T_co

    def __gencall_unwrap__(self) -> _T_co:
        return self.value


def unwrap(value: Any) -> Any:
    while isinstance(value, SupportsUnwrap) and not isinstance(value, type):
        value = value.__gencall_unwrap__()
    return value


def invoke(
    method: ConcreteMethod,
    target: Any,
    arguments: Sequence[Any],
) -> Any:
    """Call *method* on *target* with *arguments*.

    *target* is ignored for static methods, must be an instance for
    instance methods and may be either a class or an instance for class
    methods.
    """
    fn = method.bind(target)
    args = [unwrap(a) for a in arguments]
    logger.debug("calling %s with %r", method, args)
    return fn(*args)
