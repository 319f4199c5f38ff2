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

"""Frozen dataclass helpers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import (
    TypedDict,
    TypeVar,
    Unpack,
    cast,
    dataclass_transform,
)

__all__ = ["FrozenDataclass", "replace_fields"]

T = TypeVar("T")


class DataclassOptions(TypedDict, total=False):
    init: bool
    repr: bool
    eq: bool
    order: bool
    unsafe_hash: bool
    frozen: bool
    match_args: bool
    kw_only: bool
    slots: bool


@dataclass_transform(frozen_default=True)
def FrozenDataclass(
    **dataclass_kwargs: Unpack[DataclassOptions],
) -> Callable[[type[T]], type[T]]:
    """Dataclass decorator with frozen, slotted defaults.

    The decorator mirrors :func:`dataclasses.dataclass` while defaulting to
    ``frozen=True`` and ``slots=True``. Use :func:`replace_fields` to derive
    modified copies, including fields declared with ``init=False``.
    """

    options: DataclassOptions = {
        "init": True,
        "repr": True,
        "eq": True,
        "order": False,
        "unsafe_hash": False,
        "frozen": True,
        "match_args": True,
        "kw_only": False,
        "slots": True,
        **dataclass_kwargs,
    }

    def decorator(cls: type[T]) -> type[T]:
        return cast(Callable[[type[T]], type[T]], dataclass(**options))(cls)

    return decorator


def replace_fields[InstanceT](
    instance: InstanceT, changes: Mapping[str, object]
) -> InstanceT:
    """Return a copy of a frozen dataclass with ``changes`` applied.

    Unlike :func:`dataclasses.replace` the copy bypasses ``__init__``, so
    fields declared with ``init=False`` can be replaced too. ``__post_init__``
    runs on the copy when the class defines one, which lets it validate or
    normalize the new values.
    """

    cls = type(instance)
    field_defs = fields(cast(type[object], cls))
    values = {field.name: getattr(instance, field.name) for field in field_defs}

    unknown = set(changes) - values.keys()
    if unknown:
        joined = ", ".join(sorted(unknown))
        raise TypeError(f"{cls.__name__}() got unexpected field(s): {joined}")

    values.update(changes)
    new_instance = cls.__new__(cls)
    for name, value in values.items():
        object.__setattr__(new_instance, name, value)

    post_init = getattr(new_instance, "__post_init__", None)
    if callable(post_init):
        _ = post_init()

    return new_instance
