# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

"""Evaluation and normalization of annotations.

Annotations are turned into runtime typing objects in a single canonical
form: forward references are evaluated, PEP 695 type aliases are
unwrapped, ``Annotated`` metadata is dropped and ``typing.Union`` is
rebuilt as a PEP 604 union, so that the rest of the package only has to
deal with classes, generic aliases, unions and type variables.
"""

from typing import (
    Any,
    Literal,
    Mapping,
)
from typing_extensions import (
    ForwardRef,
    TypeVar,
    TypeVarTuple,
    ParamSpec,
)

from typing_extensions import evaluate_forward_ref  # type: ignore [attr-defined]

from collections.abc import (
    Callable,
    Iterable,
)

import sys
import typing
import types

from . import _typing_inspect


_TypeParams = Iterable[TypeVar | ParamSpec | TypeVarTuple]


def module_ns_of(obj: Any) -> dict[str, Any]:
    """Return the globals of the module where *obj* was defined."""
    module = sys.modules.get(getattr(obj, "__module__", None) or "")
    if module is None:
        return {}
    return module.__dict__


def resolve_type(
    value: Any,
    *,
    owner: types.ModuleType | type[Any] | None = None,
    globals: Mapping[str, Any] | None = None,
    locals: Mapping[str, Any] | None = None,
    type_params: _TypeParams | None = None,
) -> Any:
    if isinstance(value, str):
        value = ForwardRef(value)

    if _typing_inspect.is_forward_ref(value):
        value = evaluate_forward_ref(
            value,
            owner=owner,
            globals=globals,
            locals=locals,
            type_params=type_params,
        )

    def _resolve(v: Any) -> Any:
        return resolve_type(
            v,
            owner=owner,
            globals=globals,
            locals=locals,
            type_params=type_params,
        )

    if value is None:
        return types.NoneType
    elif _typing_inspect.is_type_alias(value):
        # PEP 695 TypeAliasType -> unwrap its __value__
        module = sys.modules.get(value.__module__) if value.__module__ else None
        value = value.__value__
        if isinstance(value, str):
            value = resolve_type(
                ForwardRef(value),
                globals=module.__dict__ if module is not None else {},
            )
        return resolve_type(value)
    elif isinstance(value, list):
        # The parameter list of Callable[[...], R]
        return [_resolve(a) for a in value]
    elif _typing_inspect.is_union_type(value):
        # typing.Union[...] and X | Y -> PEP 604 union of resolved members
        return _typing_inspect.make_union(
            _resolve(a) for a in typing.get_args(value)
        )
    elif _typing_inspect.is_annotated(value):
        # typing.Annotated[...] -> drop metadata
        return _resolve(typing.get_args(value)[0])
    elif _typing_inspect.is_generic_alias(value):
        origin = typing.get_origin(value)
        args = typing.get_args(value)

        # Literal arguments are values, not types
        if origin is Literal:
            return value
        # other typing generics (e.g. list[int])
        elif not args:
            return value
        else:
            resolved_base = _resolve(origin)
            resolved_args = tuple(_resolve(a) for a in args)
            return resolved_base[resolved_args]
    else:
        # everything else is already a runtime type
        return value


def resolve_signature_hints(
    fn: Callable[..., Any],
) -> dict[str, Any]:
    """Return normalized annotations of *fn* keyed by parameter name.

    The return annotation, if any, is stored under ``"return"``.
    Unannotated parameters are absent from the result.
    """
    ns = module_ns_of(fn)
    type_params = getattr(fn, "__type_params__", None) or None
    localns = {tp.__name__: tp for tp in type_params} if type_params else None
    hints = typing.get_type_hints(fn, globalns=ns, localns=localns)
    return {
        n: resolve_type(t, globals=ns, type_params=type_params)
        for n, t in hints.items()
    }
