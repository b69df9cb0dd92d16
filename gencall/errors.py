# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

"""Exceptions raised by gencall."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

from gencall._internal._utils import args_repr, type_repr

if TYPE_CHECKING:
    from collections.abc import Sequence


__all__ = (
    "GenericCallError",
    "MalformedCandidateError",
    "NoMatchingMethodError",
)


class GenericCallError(Exception):
    """Base class for all gencall errors."""


class MalformedCandidateError(GenericCallError, TypeError):
    """A candidate's declared parameter type references a type variable
    that is not one of the method's own type parameters.

    This signals broken method metadata rather than an argument mismatch,
    so it aborts the whole resolution instead of rejecting one candidate.
    """

    def __init__(
        self,
        method_name: str,
        parameter_name: str,
        declared_type: Any,
    ) -> None:
        super().__init__(
            f"could not determine runtime type of parameter "
            f"{parameter_name!r} of {method_name!r}: "
            f"{type_repr(declared_type)} is not a type parameter "
            f"of the method"
        )
        self.method_name = method_name
        self.parameter_name = parameter_name
        self.declared_type = declared_type


class NoMatchingMethodError(GenericCallError, LookupError):
    """No generic overload accepts the requested type arguments and
    arguments."""

    def __init__(
        self,
        target: Any,
        method_name: str,
        type_args: Sequence[Any],
        arguments: Sequence[Any],
    ) -> None:
        super().__init__(
            f"no generic method {method_name}[{args_repr(type_args)}] "
            f"on {type_repr(target)} accepts arguments {list(arguments)!r}"
        )
        self.target = target
        self.method_name = method_name
        self.type_args = tuple(type_args)
        self.arguments = tuple(arguments)
