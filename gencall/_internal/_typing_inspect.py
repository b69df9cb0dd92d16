# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.


from typing import (
    Annotated,
    Any,
    ForwardRef,
    Literal,
    TypeGuard,
    TypeVar,
    Union,
    get_args,
    get_origin,
)
from typing import _GenericAlias, _SpecialGenericAlias  # type: ignore [attr-defined]  # noqa: PLC2701
from typing_extensions import TypeAliasType
from types import GenericAlias, NoneType, UnionType

import functools
import operator


def is_generic_alias(t: Any) -> TypeGuard[GenericAlias]:
    return isinstance(t, (GenericAlias, _GenericAlias, _SpecialGenericAlias))


def is_type_alias(t: Any) -> TypeGuard[TypeAliasType]:
    return isinstance(t, TypeAliasType)


def is_annotated(t: Any) -> TypeGuard[Annotated[Any, ...]]:
    return is_generic_alias(t) and get_origin(t) is Annotated  # type: ignore [comparison-overlap]


def is_forward_ref(t: Any) -> TypeGuard[ForwardRef]:
    return isinstance(t, ForwardRef)


def is_type_var(t: Any) -> TypeGuard[TypeVar]:
    return isinstance(t, TypeVar)


def is_literal(t: Any) -> bool:
    return is_generic_alias(t) and get_origin(t) is Literal  # type: ignore [comparison-overlap]


def is_union_type(t: Any) -> bool:
    return (
        (is_generic_alias(t) and get_origin(t) is Union)  # type: ignore [comparison-overlap]
        or isinstance(t, UnionType)
    )


def is_optional_type(t: Any) -> bool:
    return is_union_type(t) and NoneType in get_args(t)


def unwrap_optional(t: Any) -> Any:
    """Return the inner type of ``X | None``.

    ``int | str | None`` unwraps to ``int | str``.
    """
    if not is_optional_type(t):
        return t
    inner = [a for a in get_args(t) if a is not NoneType]
    return make_union(inner)


def make_union(members: Any) -> Any:
    return functools.reduce(operator.or_, members)


def admits_none(t: Any) -> bool:
    """Whether ``None`` is a legal value for a parameter of type *t*."""
    return t is Any or t is object or t is NoneType or is_optional_type(t)


def generic_model_parts(t: Any) -> tuple[type[Any], tuple[Any, ...]] | None:
    """Return ``(origin, args)`` of a pydantic generic model class that
    still has free type variables, or ``None``.

    Pydantic models are parametrized by subclassing: ``Model[list[T]]``
    is a real class and ``Model[T]`` over the model's own parameter is
    ``Model`` itself, so the arguments live in
    ``__pydantic_generic_metadata__`` rather than ``__args__``.
    """
    if not isinstance(t, type):
        return None
    meta = getattr(t, "__pydantic_generic_metadata__", None)
    if not meta or not meta.get("parameters"):
        return None
    if meta.get("origin"):
        return meta["origin"], tuple(meta.get("args", ()))
    else:
        return t, tuple(meta["parameters"])


def generic_args(t: Any) -> tuple[Any, ...]:
    parts = generic_model_parts(t)
    if parts is not None:
        return parts[1]
    return get_args(t)


def contains_type_params(t: Any) -> bool:
    """Whether *t* has a type variable anywhere in its structure."""
    if is_type_var(t):
        return True
    elif isinstance(t, (list, tuple)):
        # Argument lists of Callable[[...], R]
        return any(contains_type_params(el) for el in t)
    elif is_literal(t):
        return False
    elif is_generic_alias(t) or is_union_type(t):
        # Walk the arguments: list[Model[T]] has empty __parameters__
        # when Model is a pydantic generic model.
        return any(contains_type_params(a) for a in get_args(t))
    else:
        return generic_model_parts(t) is not None


def iter_type_vars(t: Any) -> list[TypeVar]:
    """Return the type variables referenced by *t* in order of appearance."""
    found: list[TypeVar] = []

    def _walk(el: Any) -> None:
        if is_type_var(el):
            if not any(el is f for f in found):
                found.append(el)
        elif isinstance(el, (list, tuple)):
            for sub in el:
                _walk(sub)
        elif contains_type_params(el):
            for sub in generic_args(el):
                _walk(sub)

    _walk(t)
    return found
