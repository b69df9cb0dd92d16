# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

"""Generic method resolution.

Resolution runs in two phases over the same candidate list.  The first
phase only accepts arguments whose runtime type is exactly the required
type; the second phase, entered only when the first one finds nothing,
also accepts arguments that can be converted.  An exact overload is
therefore always preferred over one that needs conversion, regardless
of declaration order.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

import dataclasses
import logging

from . import _catalog
from . import _config
from . import _matching
from . import _typing_eval
from ._utils import args_repr, type_repr

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


logger = logging.getLogger("gencall.resolver")


@dataclasses.dataclass(frozen=True, kw_only=True)
class ResolvedBinding:
    """A specialized method and the arguments to call it with."""

    method: _catalog.ConcreteMethod
    arguments: tuple[Any, ...]


def _phases(allow_coercion: bool | None) -> tuple[bool, ...]:
    if allow_coercion is None:
        allow_coercion = _config.Settings.from_env().allow_coercion
    return (False, True) if allow_coercion else (False,)


def _normalize_type_args(type_args: Sequence[Any]) -> tuple[Any, ...]:
    # None stands for NoneType, as it does in annotations.
    return tuple(_typing_eval.resolve_type(a) for a in type_args)


def resolve_among(
    candidates: Iterable[_catalog.CandidateMethod],
    type_args: Sequence[Any],
    arguments: Sequence[Any],
    *,
    allow_coercion: bool | None = None,
) -> ResolvedBinding | None:
    """Pick the first of *candidates* that accepts *arguments* once
    specialized with *type_args*.

    Returns ``None`` if no candidate does.
    """
    type_args = _normalize_type_args(type_args)
    candidates = [
        c
        for c in candidates
        if c.is_generic and len(c.type_params) == len(type_args)
    ]

    for coerce in _phases(allow_coercion):
        for candidate in candidates:
            ok, final_arguments = _matching.match_candidate(
                candidate,
                arguments,
                type_args,
                allow_coercion=coerce,
            )
            if ok:
                method = _catalog.specialize(candidate, type_args)
                logger.debug(
                    "resolved %s%s",
                    method,
                    " with coercion" if coerce else "",
                )
                return ResolvedBinding(
                    method=method,
                    arguments=tuple(final_arguments),
                )

        if not coerce and candidates:
            logger.debug(
                "no exact match among %d candidate(s)", len(candidates)
            )

    return None


def resolve_method(
    target: Any,
    scope: _catalog.BindingScope,
    name: str,
    type_args: Sequence[Any],
    arguments: Sequence[Any],
    *,
    allow_coercion: bool | None = None,
) -> ResolvedBinding | None:
    """Find the generic method *name* of *target* that accepts
    *arguments* when specialized with *type_args*.

    *target* is a class, a parametrized generic class (``Box[int]``) or
    an instance.  Returns ``None`` when there is no matching overload.
    Raises :exc:`~gencall.errors.MalformedCandidateError` when a
    candidate's metadata references an unknown type variable.

    *allow_coercion* defaults to the ``GENCALL_NO_COERCION``
    environment setting.
    """
    candidates = _catalog.find_candidates(target, scope, name, len(type_args))
    logger.debug(
        "resolving %s[%s] on %s: %d candidate(s)",
        name,
        args_repr(type_args),
        type_repr(target),
        len(candidates),
    )
    return resolve_among(
        candidates,
        type_args,
        arguments,
        allow_coercion=allow_coercion,
    )
