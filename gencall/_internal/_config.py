# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

"""Environment driven settings."""

from __future__ import annotations
from typing import TYPE_CHECKING

import dataclasses
import os

if TYPE_CHECKING:
    from collections.abc import Mapping


_TRUTHY = frozenset({"1", "true", "t", "yes", "y"})


def _env_flag(env: Mapping[str, str], name: str) -> bool:
    return env.get(name, "").strip().lower() in _TRUTHY


@dataclasses.dataclass(frozen=True, kw_only=True)
class Settings:
    #: Enable debug logging in the command line front end.
    debug: bool = False
    #: Allow the coercion phase of method resolution.
    allow_coercion: bool = True

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        if env is None:
            env = os.environ
        return cls(
            debug=_env_flag(env, "GENCALL_DEBUG"),
            allow_coercion=not _env_flag(env, "GENCALL_NO_COERCION"),
        )
