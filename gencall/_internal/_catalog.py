# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

"""Reflection of classes into generic method description records.

Every method reachable on a target is described by a
:class:`CandidateMethod`: its name, how it binds (instance, class or
static), its own type parameters and its positional parameters with
their declared types and defaults.  Type variables that belong to the
owning class are closed over here, from the target's parametrization
when it has one (``Box[int]``, an instance created as ``Box[int]()``, or
a subclass of ``Box[int]``) and to ``Any`` otherwise.
"""

from __future__ import annotations
from typing import (
    TYPE_CHECKING,
    Any,
    Generic,
    Protocol,
    TypeVar,
)
from typing_extensions import get_overloads

import dataclasses
import enum
import inspect
import logging
import types
import typing

from . import _substitution
from . import _typing_eval
from . import _typing_inspect
from ._utils import Unspecified, args_repr, type_repr

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping


logger = logging.getLogger("gencall.catalog")


class MethodKind(enum.Enum):
    INSTANCE = "instance"
    CLASS = "class"
    STATIC = "static"


class BindingScope(enum.Flag):
    """Which methods of a target are visible to resolution."""

    INSTANCE = 1
    STATIC = 2
    PUBLIC = 4
    NON_PUBLIC = 8

    PUBLIC_INSTANCE = INSTANCE | PUBLIC
    PUBLIC_STATIC = STATIC | PUBLIC
    ALL = INSTANCE | STATIC | PUBLIC | NON_PUBLIC

    def admits(self, name: str, kind: MethodKind) -> bool:
        if kind is MethodKind.INSTANCE:
            if BindingScope.INSTANCE not in self:
                return False
        elif BindingScope.STATIC not in self:
            return False

        if is_public_name(name):
            return BindingScope.PUBLIC in self
        else:
            return BindingScope.NON_PUBLIC in self


def is_public_name(name: str) -> bool:
    return not name.startswith("_") or (
        name.startswith("__") and name.endswith("__")
    )


@dataclasses.dataclass(frozen=True, kw_only=True)
class DeclaredParameter:
    name: str
    type: Any
    default: Any = Unspecified

    @property
    def has_default(self) -> bool:
        return self.default is not Unspecified

    def __str__(self) -> str:
        s = f"{self.name}: {type_repr(self.type)}"
        if self.has_default:
            s += f" = {self.default!r}"
        return s


@dataclasses.dataclass(frozen=True, kw_only=True)
class CandidateMethod:
    name: str
    func: Callable[..., Any]
    kind: MethodKind
    type_params: tuple[TypeVar, ...]
    parameters: tuple[DeclaredParameter, ...]
    return_type: Any = Any

    @property
    def is_generic(self) -> bool:
        return bool(self.type_params)

    def __str__(self) -> str:
        tparams = f"[{args_repr(self.type_params)}]" if self.type_params else ""
        params = ", ".join(str(p) for p in self.parameters)
        prefix = "" if self.kind is MethodKind.INSTANCE else f"{self.kind.value} "
        return (
            f"{prefix}{self.name}{tparams}({params}) "
            f"-> {type_repr(self.return_type)}"
        )


@dataclasses.dataclass(frozen=True, kw_only=True)
class ConcreteMethod:
    """A candidate with its type parameters bound to concrete types."""

    candidate: CandidateMethod
    type_args: Mapping[TypeVar, Any]
    parameter_types: tuple[Any, ...]
    return_type: Any

    @property
    def name(self) -> str:
        return self.candidate.name

    def bind(self, target: Any) -> Callable[..., Any]:
        """Return a Python callable for this method on *target*."""
        func = self.candidate.func
        kind = self.candidate.kind
        if kind is MethodKind.STATIC:
            return func
        elif kind is MethodKind.CLASS:
            return types.MethodType(func, _class_of(target))
        elif target is None or _is_class_like(target):
            raise TypeError(
                f"{self.name}() is an instance method and requires "
                f"an instance target, got {type_repr(target)}"
            )
        else:
            return types.MethodType(func, target)

    def __str__(self) -> str:
        targs = args_repr(self.type_args.values())
        params = ", ".join(
            f"{p.name}: {type_repr(t)}"
            for p, t in zip(
                self.candidate.parameters, self.parameter_types, strict=True
            )
        )
        return (
            f"{self.name}[{targs}]({params}) -> {type_repr(self.return_type)}"
        )


def specialize(
    candidate: CandidateMethod,
    type_args: tuple[Any, ...],
) -> ConcreteMethod:
    bindings = _substitution.bind_type_params(candidate.type_params, type_args)

    def _lookup(tv: TypeVar) -> Any:
        return bindings.get(tv, tv)

    return ConcreteMethod(
        candidate=candidate,
        type_args=bindings,
        parameter_types=tuple(
            _substitution.substitute(p.type, _lookup)
            for p in candidate.parameters
        ),
        return_type=_substitution.substitute(candidate.return_type, _lookup),
    )


def _is_class_like(target: Any) -> bool:
    return isinstance(target, type) or _typing_inspect.is_generic_alias(target)


def _class_of(target: Any) -> type[Any]:
    if _typing_inspect.is_generic_alias(target):
        return typing.get_origin(target)  # type: ignore [no-any-return]
    elif isinstance(target, type):
        return target
    else:
        return type(target)


def _method_kind(attr: Any) -> MethodKind | None:
    if isinstance(attr, staticmethod):
        return MethodKind.STATIC
    elif isinstance(attr, classmethod):
        return MethodKind.CLASS
    elif isinstance(attr, types.FunctionType):
        return MethodKind.INSTANCE
    else:
        return None


class _OwnerBindings:
    """Class level type variable bindings of a target."""

    def __init__(self, target: Any) -> None:
        if _typing_inspect.is_generic_alias(target):
            cls = typing.get_origin(target)
            args = typing.get_args(target)
        elif isinstance(target, type):
            cls = target
            args = ()
        elif (orig := getattr(target, "__orig_class__", None)) is not None:
            cls = typing.get_origin(orig)
            args = typing.get_args(orig)
        else:
            cls = type(target)
            args = ()

        self.cls: type[Any] = cls
        self.class_params: set[TypeVar] = set()
        for klass in cls.__mro__:
            self.class_params.update(
                p
                for p in getattr(klass, "__parameters__", ())
                if _typing_inspect.is_type_var(p)
            )

        bindings: dict[TypeVar, Any] = {}
        if args:
            bindings.update(
                zip(getattr(cls, "__parameters__", ()), args, strict=False)
            )

        # Walk generic bases most-derived first, so that
        # class Sub(Box[int]) binds Box's T to int.
        for klass in cls.__mro__:
            for base in klass.__dict__.get("__orig_bases__", ()):
                origin = typing.get_origin(base)
                if origin is None or origin is Generic or origin is Protocol:
                    continue
                base_params = getattr(origin, "__parameters__", ())
                for param, arg in zip(
                    base_params, typing.get_args(base), strict=False
                ):
                    if param not in bindings:
                        bindings[param] = _substitution.substitute(
                            arg, lambda tv: bindings.get(tv, tv)
                        )

        self.bindings = {
            tv: _substitution.substitute(v, self._close_unbound)
            for tv, v in bindings.items()
        }

    def _close_unbound(self, tv: TypeVar) -> Any:
        return Any if tv in self.class_params else tv

    def close(self, tv: TypeVar) -> Any:
        if tv in self.bindings:
            return self.bindings[tv]
        else:
            return self._close_unbound(tv)


def reflect_method(
    func: Callable[..., Any],
    *,
    kind: MethodKind = MethodKind.STATIC,
    name: str | None = None,
    owner: Any = None,
) -> CandidateMethod | None:
    """Describe *func* as a :class:`CandidateMethod`.

    Returns ``None`` when the function cannot be called with positional
    arguments only (it has keyword-only parameters without defaults).
    *owner* is the target the method is looked up on and is used to
    close class level type variables.
    """
    raw: Callable[..., Any] = getattr(func, "__func__", func)
    if name is None:
        name = raw.__name__

    closure: Callable[[TypeVar], Any]
    if owner is not None:
        closure = _OwnerBindings(owner).close
    else:
        def closure(tv: TypeVar) -> Any:
            return tv

    sig = inspect.signature(raw)
    hints = _typing_eval.resolve_signature_hints(raw)

    params = list(sig.parameters.values())
    if kind is not MethodKind.STATIC and params:
        # self / cls
        params = params[1:]

    declared = []
    for param in params:
        if param.kind in {param.VAR_POSITIONAL, param.VAR_KEYWORD}:
            continue
        elif param.kind is param.KEYWORD_ONLY:
            if param.default is param.empty:
                logger.debug(
                    "%s: keyword-only parameter %r has no default, "
                    "method is not callable positionally",
                    name,
                    param.name,
                )
                return None
            continue

        declared.append(
            DeclaredParameter(
                name=param.name,
                type=_substitution.substitute(
                    hints.get(param.name, Any), closure
                ),
                default=(
                    Unspecified
                    if param.default is param.empty
                    else param.default
                ),
            )
        )

    return_type = _substitution.substitute(hints.get("return", Any), closure)

    own_params = getattr(raw, "__type_params__", ())
    type_params: tuple[TypeVar, ...]
    if own_params:
        type_params = tuple(
            p for p in own_params if _typing_inspect.is_type_var(p)
        )
    else:
        type_params = tuple(
            _typing_inspect.iter_type_vars(
                [p.type for p in declared] + [return_type]
            )
        )

    return CandidateMethod(
        name=name,
        func=raw,
        kind=kind,
        type_params=type_params,
        parameters=tuple(declared),
        return_type=return_type,
    )


def _lookup_member(cls: type[Any], name: str) -> Any:
    for klass in cls.__mro__:
        if name in klass.__dict__:
            return klass.__dict__[name]
    return None


def _iter_member_names(cls: type[Any]) -> Iterator[str]:
    seen = set()
    for klass in cls.__mro__:
        if klass is object:
            continue
        for name in klass.__dict__:
            if name not in seen:
                seen.add(name)
                yield name


def iter_candidates(
    target: Any,
    scope: BindingScope,
    name: str,
) -> Iterator[CandidateMethod]:
    """Yield every overload of *name* visible on *target* under *scope*.

    Registered ``@overload`` definitions are yielded in declaration
    order; a method without overloads is its own single candidate.
    Only the most-derived definition of *name* is considered.
    """
    cls = _class_of(target)
    attr = _lookup_member(cls, name)
    if attr is None:
        return

    kind = _method_kind(attr)
    if kind is None or not scope.admits(name, kind):
        return

    impl = getattr(attr, "__func__", attr)
    overloads = get_overloads(impl) or [impl]
    for fn in overloads:
        candidate = reflect_method(fn, kind=kind, name=name, owner=target)
        if candidate is not None:
            yield candidate


def find_candidates(
    target: Any,
    scope: BindingScope,
    name: str,
    type_arg_count: int,
) -> list[CandidateMethod]:
    """Return the generic candidates of *name* with *type_arg_count*
    type parameters."""
    result = []
    for candidate in iter_candidates(target, scope, name):
        if not candidate.is_generic:
            logger.debug("%s: not generic, skipped", candidate)
        elif len(candidate.type_params) != type_arg_count:
            logger.debug(
                "%s: expects %d type argument(s), got %d",
                candidate,
                len(candidate.type_params),
                type_arg_count,
            )
        else:
            result.append(candidate)
    return result


def iter_generic_methods(
    target: Any,
    scope: BindingScope,
) -> Iterator[CandidateMethod]:
    """Yield every generic candidate visible on *target*."""
    cls = _class_of(target)
    for name in _iter_member_names(cls):
        for candidate in iter_candidates(target, scope, name):
            if candidate.is_generic:
                yield candidate


def default_scope(target: Any) -> BindingScope:
    """Scope used when the caller does not give one explicitly."""
    if _is_class_like(target):
        return BindingScope.PUBLIC_STATIC
    else:
        return BindingScope.PUBLIC_INSTANCE
