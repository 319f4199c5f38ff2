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

"""Common type definitions shared across blueprint.

Dynamic Values
--------------
The codec converts declared types to and from a JSON-like *dynamic value*:

:data:`DynamicValue`
    The recursive union of all values the codec emits or accepts::

        type DynamicValue = str | int | float | bool | DynamicMap | DynamicList

:data:`DynamicMap`
    A mapping with string keys and dynamic values. Structs and one-of types
    always serialize to a :data:`DynamicMap`.

:data:`DynamicList`
    A sequence of dynamic values, produced by ``list_of(...)`` fields.

``None`` is never emitted: an optional field that is not set is
omitted from the mapping rather than emitted as ``null``.

:data:`ContractResult`
    Return type for design-by-contract predicates used with
    :mod:`blueprint.dbc`.
"""

from __future__ import annotations

from .json import (
    ContractResult,
    DynamicList,
    DynamicMap,
    DynamicScalar,
    DynamicValue,
)

__all__ = [
    "ContractResult",
    "DynamicList",
    "DynamicMap",
    "DynamicScalar",
    "DynamicValue",
]
