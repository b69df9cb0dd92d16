# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

"""Type variable substitution over (nested) generic types.

A declared type is treated as a tree: leaves are type variables or
concrete types, internal nodes are generic origins (``list``, ``dict``,
user ``Generic`` classes and pydantic generic models, unions,
``Callable``...).  Substitution is a structure-preserving rewrite of
that tree.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, TypeVar

import typing

from . import _typing_inspect
from ._utils import Unspecified, UnspecifiedType

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


class UnboundTypeVarError(LookupError):
    def __init__(self, type_var: TypeVar) -> None:
        super().__init__(f"{type_var!r} is not bound")
        self.type_var = type_var


def substitute(tp: Any, lookup: Callable[[TypeVar], Any]) -> Any:
    """Replace every type variable in *tp* with ``lookup(typevar)``.

    Generic aliases are rebuilt from their origin with the substituted
    arguments in the same positions, recursively.  Types without type
    variables are returned unchanged.
    """
    if _typing_inspect.is_type_var(tp):
        return lookup(tp)
    elif isinstance(tp, list):
        return [substitute(el, lookup) for el in tp]
    elif not _typing_inspect.contains_type_params(tp):
        return tp

    model_parts = _typing_inspect.generic_model_parts(tp)
    if model_parts is not None:
        origin, model_args = model_parts
        return origin[tuple(substitute(a, lookup) for a in model_args)]

    args = tuple(substitute(a, lookup) for a in typing.get_args(tp))
    if _typing_inspect.is_union_type(tp):
        return _typing_inspect.make_union(args)
    else:
        origin = typing.get_origin(tp)
        return origin[args]


def resolve_parameter_type(
    declared: Any,
    type_args: Sequence[Any],
    type_params: Sequence[TypeVar],
) -> Any | UnspecifiedType:
    """Compute the concrete type a parameter declared as *declared*
    accepts once *type_params* are bound positionally to *type_args*.

    Returns ``Unspecified`` if *declared* references a type variable
    that is not among *type_params*.
    """

    def _lookup(tv: TypeVar) -> Any:
        for i, param in enumerate(type_params):
            if param is tv:
                return type_args[i]
        raise UnboundTypeVarError(tv)

    try:
        return substitute(declared, _lookup)
    except UnboundTypeVarError:
        return Unspecified


def bind_type_params(
    type_params: Sequence[TypeVar],
    type_args: Sequence[Any],
) -> dict[TypeVar, Any]:
    return dict(zip(type_params, type_args, strict=True))
