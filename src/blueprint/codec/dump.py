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

"""Serialization entry points."""

from __future__ import annotations

import json
from typing import cast

from ..types import DynamicValue
from ._utils import schema_of


def serialize(value: object) -> dict[str, DynamicValue]:
    """Serialize a struct or one-of value into a dynamic mapping."""

    declared = None if isinstance(value, type) else schema_of(value)
    if declared is None:
        raise TypeError("serialize() requires a @struct or @one_of value")
    return cast(dict[str, DynamicValue], declared.encode(value))


def dumps(value: object, *, indent: int | str | None = None) -> str:
    """Serialize ``value`` to JSON text.

    Non-finite floats are rejected with ``ValueError`` since JSON has no
    representation for them.
    """

    return json.dumps(serialize(value), indent=indent, allow_nan=False)


__all__ = ["dumps", "serialize"]
