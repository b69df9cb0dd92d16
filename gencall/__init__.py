# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

"""Invoke generic methods from runtime values.

Given a target, a method name, explicit type arguments and positional
arguments, pick the generic overload that accepts the arguments once its
type parameters are bound, fill in omitted trailing arguments from
declared defaults, convert arguments when no overload accepts them as
they are, and call it::

    class Store:
        def put(self, key: str, value: T, *, ttl: int = 0) -> T: ...

    gencall.invoke_generic_method(store, "put", [int], ["answer", "42"])
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

from gencall._internal._catalog import (
    BindingScope,
    CandidateMethod,
    ConcreteMethod,
    DeclaredParameter,
    MethodKind,
    default_scope,
    reflect_method,
)
from gencall._internal._invoker import Wrapped, invoke, unwrap
from gencall._internal._resolver import (
    ResolvedBinding,
    resolve_among,
    resolve_method,
)
from gencall.errors import (
    GenericCallError,
    MalformedCandidateError,
    NoMatchingMethodError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence


__version__ = "1.0.0"


def invoke_generic_method(
    target: Any,
    name: str,
    type_args: Sequence[Any],
    arguments: Sequence[Any] = (),
    *,
    scope: BindingScope | None = None,
    allow_coercion: bool | None = None,
) -> Any:
    """Resolve and call the generic method *name* on *target*.

    *target* is an instance, or a class for static and class methods.
    Without an explicit *scope* public static methods are searched for a
    class target and public instance methods for an instance target.

    Raises :exc:`NoMatchingMethodError` when no overload accepts the
    arguments.
    """
    if scope is None:
        scope = default_scope(target)

    binding = resolve_method(
        target,
        scope,
        name,
        type_args,
        arguments,
        allow_coercion=allow_coercion,
    )
    if binding is None:
        raise NoMatchingMethodError(target, name, type_args, arguments)

    return invoke(binding.method, target, binding.arguments)


__all__ = (
    "BindingScope",
    "CandidateMethod",
    "ConcreteMethod",
    "DeclaredParameter",
    "GenericCallError",
    "MalformedCandidateError",
    "MethodKind",
    "NoMatchingMethodError",
    "ResolvedBinding",
    "Wrapped",
    "default_scope",
    "invoke",
    "invoke_generic_method",
    "reflect_method",
    "resolve_among",
    "resolve_method",
    "unwrap",
)
