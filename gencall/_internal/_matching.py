# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

"""Matching of supplied arguments against one candidate's parameters."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, TypeVar
from collections.abc import Collection, Mapping

import logging
import typing

from gencall.errors import MalformedCandidateError

from . import _conversion
from . import _substitution
from . import _typing_eval
from . import _typing_inspect
from ._utils import Unspecified, type_repr

if TYPE_CHECKING:
    from collections.abc import Sequence
    from ._catalog import CandidateMethod, DeclaredParameter


logger = logging.getLogger("gencall.matching")


def _is_exact_instance(obj: Any, tp: Any) -> bool:
    """Whether the runtime type of *obj* is exactly *tp*.

    Subclass instances do not match; generic aliases are checked
    structurally against the contents of builtin collections.
    """
    if tp is Any:
        return True

    elif _typing_inspect.is_union_type(tp):
        return any(_is_exact_instance(obj, el) for el in typing.get_args(tp))

    elif _typing_inspect.is_literal(tp):
        return any(
            type(obj) is type(lit) and obj == lit
            for lit in typing.get_args(tp)
        )

    elif _typing_inspect.is_generic_alias(tp):
        origin = typing.get_origin(tp)
        args = typing.get_args(tp)

        if not isinstance(origin, type):
            return False

        elif origin is type:
            return isinstance(obj, type) and obj is args[0]

        elif not _is_builtin_collection(origin):
            if origin.__module__ == "collections.abc":
                # Callable[...], Iterable[...] etc. describe an interface
                # rather than a runtime class.
                return isinstance(obj, origin)
            elif type(obj) is not origin:
                return False
            orig_class = getattr(obj, "__orig_class__", None)
            return orig_class is None or orig_class == tp

        elif type(obj) is not origin:
            return False

        elif issubclass(origin, Mapping):
            if len(args) != 2:
                return True
            return all(
                _is_exact_instance(k, args[0])
                and _is_exact_instance(v, args[1])
                for k, v in obj.items()
            )

        elif issubclass(origin, tuple):
            if len(args) == 2 and args[1] is ...:
                return all(_is_exact_instance(el, args[0]) for el in obj)
            elif len(args) != len(obj):
                return False
            return all(
                _is_exact_instance(el, el_type)
                for el, el_type in zip(obj, args, strict=True)
            )

        else:
            if not args:
                return True
            return all(_is_exact_instance(el, args[0]) for el in obj)

    else:
        return type(obj) is tp


def _is_builtin_collection(origin: type[Any]) -> bool:
    return origin.__module__ == "builtins" and issubclass(origin, Collection)


def type_args_satisfy_params(
    type_params: Sequence[TypeVar],
    type_args: Sequence[Any],
    fn: Any,
) -> bool:
    """Check *type_args* against the bounds and constraints of
    *type_params*."""
    for param, arg in zip(type_params, type_args, strict=True):
        if not _satisfies(arg, param, fn):
            logger.debug(
                "type argument %s does not satisfy %r",
                type_repr(arg),
                param,
            )
            return False
    return True


def _satisfies(arg: Any, param: TypeVar, fn: Any) -> bool:
    if arg is Any or _typing_inspect.is_union_type(arg):
        return True

    arg_cls = typing.get_origin(arg) or arg
    if not isinstance(arg_cls, type):
        # Unions and other special forms are not checked.
        return True

    constraints = param.__constraints__
    if constraints:
        return any(
            _is_subclass(arg_cls, _resolve_bound(c, fn)) for c in constraints
        )

    bound = param.__bound__
    if bound is None:
        return True
    return _is_subclass(arg_cls, _resolve_bound(bound, fn))


def _resolve_bound(tp: Any, fn: Any) -> Any:
    ns = _typing_eval.module_ns_of(fn)
    return _typing_eval.resolve_type(tp, globals=ns)


def _is_subclass(cls: type[Any], tp: Any) -> bool:
    if tp is Any or tp is object:
        return True
    elif _typing_inspect.is_union_type(tp):
        return any(_is_subclass(cls, el) for el in typing.get_args(tp))

    tp_cls = typing.get_origin(tp) or tp
    if not isinstance(tp_cls, type):
        return True
    elif getattr(tp_cls, "_is_protocol", False) and not getattr(
        tp_cls, "_is_runtime_protocol", False
    ):
        # Static-only protocols cannot be checked at runtime.
        return True
    return issubclass(cls, tp_cls)


def _match_argument(
    method_name: str,
    param: DeclaredParameter,
    arg: Any,
    type_args: Sequence[Any],
    type_params: Sequence[TypeVar],
    allow_coercion: bool,
) -> tuple[bool, Any]:
    required = _substitution.resolve_parameter_type(
        param.type, type_args, type_params
    )
    if required is Unspecified:
        raise MalformedCandidateError(method_name, param.name, param.type)

    if _typing_inspect.is_optional_type(required):
        if arg is None:
            return True, arg
        required = _typing_inspect.unwrap_optional(required)

    if arg is None and not _typing_inspect.admits_none(required):
        logger.debug(
            "%s: None is not a valid %s for %r",
            method_name,
            type_repr(required),
            param.name,
        )
        return False, arg

    if arg is None or _is_exact_instance(arg, required):
        return True, arg

    if not allow_coercion:
        return False, arg

    ok, converted = _conversion.try_convert(arg, required)
    if not ok:
        logger.debug(
            "%s: cannot coerce %r to %s for %r",
            method_name,
            arg,
            type_repr(required),
            param.name,
        )
    return ok, converted


def match_parameters(
    parameters: Sequence[DeclaredParameter],
    arguments: Sequence[Any],
    type_args: Sequence[Any],
    type_params: Sequence[TypeVar],
    *,
    allow_coercion: bool,
    method_name: str = "<method>",
) -> tuple[bool, list[Any]]:
    """Check whether *arguments* are acceptable for *parameters*.

    Returns ``(True, final_arguments)`` on success where
    ``final_arguments`` holds the supplied arguments (possibly
    coerced) followed by the defaults of the remaining parameters.
    Raises :exc:`MalformedCandidateError` if a parameter type cannot be
    computed.
    """
    if len(arguments) > len(parameters):
        logger.debug(
            "%s: takes at most %d argument(s), got %d",
            method_name,
            len(parameters),
            len(arguments),
        )
        return False, []

    final_arguments = []
    for param, arg in zip(parameters, arguments, strict=False):
        ok, value = _match_argument(
            method_name, param, arg, type_args, type_params, allow_coercion
        )
        if not ok:
            return False, []
        final_arguments.append(value)

    for param in parameters[len(arguments):]:
        if not param.has_default:
            logger.debug(
                "%s: no value for %r and no default", method_name, param.name
            )
            return False, []
        final_arguments.append(param.default)

    return True, final_arguments


def match_candidate(
    candidate: CandidateMethod,
    arguments: Sequence[Any],
    type_args: Sequence[Any],
    *,
    allow_coercion: bool,
) -> tuple[bool, list[Any]]:
    if len(type_args) != len(candidate.type_params):
        return False, []

    if not type_args_satisfy_params(
        candidate.type_params, type_args, candidate.func
    ):
        return False, []

    return match_parameters(
        candidate.parameters,
        arguments,
        type_args,
        candidate.type_params,
        allow_coercion=allow_coercion,
        method_name=candidate.name,
    )
