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

"""Schema-driven struct and one-of codec with path-qualified errors."""

from __future__ import annotations

from . import codec, dataclasses, dbc, errors, runtime, types
from .codec import (
    OneOf,
    boolean,
    deserialize,
    dumps,
    lift,
    list_of,
    loads,
    number,
    one_of,
    optional,
    required,
    schema,
    serialize,
    string,
    struct,
    variant,
)
from .errors import BlueprintError, DeserializeError, SchemaDefinitionError

__all__ = [
    "BlueprintError",
    "DeserializeError",
    "OneOf",
    "SchemaDefinitionError",
    "boolean",
    "codec",
    "dataclasses",
    "dbc",
    "deserialize",
    "dumps",
    "errors",
    "lift",
    "list_of",
    "loads",
    "number",
    "one_of",
    "optional",
    "required",
    "runtime",
    "schema",
    "serialize",
    "string",
    "struct",
    "types",
]
