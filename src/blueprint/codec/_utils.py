# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Shared helpers for codec operations."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar, Final, Literal, Protocol, cast

from ..dataclasses import FrozenDataclass

if TYPE_CHECKING:
    from ..types import DynamicValue

ROOT_PATH: Final[str] = "#"
SCHEMA_ATTR: Final[str] = "__blueprint__"
FIELD_SPEC_KEY: Final[str] = "blueprint"

ExtraMode = Literal["ignore", "forbid"]
AmbiguousMode = Literal["first", "forbid"]

_EXTRA_MODES: Final[frozenset[str]] = frozenset({"ignore", "forbid"})
_AMBIGUOUS_MODES: Final[frozenset[str]] = frozenset({"first", "forbid"})
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


@FrozenDataclass()
class _DecodeConfig:
    extra: ExtraMode = "ignore"
    ambiguous: AmbiguousMode = "first"


DEFAULT_CONFIG: Final[_DecodeConfig] = _DecodeConfig()


def decode_config(*, extra: str, ambiguous: str) -> _DecodeConfig:
    if extra not in _EXTRA_MODES:
        raise ValueError("extra must be one of 'ignore' or 'forbid'")
    if ambiguous not in _AMBIGUOUS_MODES:
        raise ValueError("ambiguous must be one of 'first' or 'forbid'")
    if extra == "ignore" and ambiguous == "first":
        return DEFAULT_CONFIG
    return _DecodeConfig(extra=extra, ambiguous=ambiguous)  # type: ignore[arg-type]


def normalize_path(path: str) -> str:
    """Map the top-level entry convention ``""`` to the root marker."""

    return path or ROOT_PATH


def child_path(path: str, name: str) -> str:
    return f"{path}/{name}"


def item_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def snake_case(name: str) -> str:
    """Return the default schema name for a class name (``SomeEnum`` -> ``some_enum``)."""

    return _CAMEL_BOUNDARY.sub("_", name).lower()


class DeclaredSchema(Protocol):
    """Schema object attached to every declared struct and one-of class."""

    kind: ClassVar[str]
    cls: type[object]
    name: str
    description: str

    def encode(self, value: object) -> DynamicValue: ...

    def decode(self, data: object, path: str, config: _DecodeConfig) -> object: ...


def schema_of(target: object) -> DeclaredSchema | None:
    """Return the declared schema attached to a struct/one-of class or instance."""

    cls = target if isinstance(target, type) else type(target)
    return cast("DeclaredSchema | None", cls.__dict__.get(SCHEMA_ATTR))


__all__ = [  # noqa: RUF022
    "DEFAULT_CONFIG",
    "FIELD_SPEC_KEY",
    "ROOT_PATH",
    "SCHEMA_ATTR",
    "AmbiguousMode",
    "DeclaredSchema",
    "ExtraMode",
    "_DecodeConfig",
    "child_path",
    "decode_config",
    "item_path",
    "normalize_path",
    "schema_of",
    "snake_case",
]
