# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

"""Miscellaneous utilities."""

from typing import Any, final

import types


@final
class UnspecifiedType:
    """A type used as a sentinel for unspecified values."""

    def __repr__(self) -> str:
        return "<Unspecified>"


Unspecified = UnspecifiedType()


def type_repr(t: Any) -> str:
    if isinstance(t, type) and not isinstance(t, types.GenericAlias):
        if t.__module__ == "builtins":
            return t.__qualname__
        else:
            return f"{t.__module__}.{t.__qualname__}"
    elif t is Ellipsis:
        return "..."
    elif isinstance(t, list):
        return "[" + ", ".join(type_repr(el) for el in t) + "]"
    else:
        return repr(t).replace("typing.", "")


def args_repr(args: Any) -> str:
    return ", ".join(type_repr(a) for a in args)
