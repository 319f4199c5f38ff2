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

"""Schema-driven codec for structs and one-of types.

This package converts declared domain values to and from the dynamic value
model (mappings with string keys, lists, strings, numbers and booleans) with
path-qualified errors. Only types declared with :func:`struct` or
:func:`one_of` take part; nothing is inferred from plain annotations.

Core Functions
--------------
serialize(value)
    Convert a struct or one-of value into a dynamic mapping.

deserialize(cls, data, path="", ...)
    Decode a dynamic value into ``cls``, raising the first failure as a
    :class:`~blueprint.errors.DeserializeError` subclass.

dumps(value) / loads(cls, text)
    The same round trip through JSON text.

schema(cls)
    Describe a declared type as a JSON Schema document.

lift(target, thing)
    Convert a value into a one-of type when it knows how.

Basic Usage
-----------
::

    from blueprint.codec import number, one_of, optional, required, string, struct, variant

    @struct("some_struct")
    class SomeStruct:
        foo: str = required(string())
        bar: int | None = optional(number())

    @one_of("some_enum")
    class SomeEnum:
        option1 = variant(SomeStruct)
        option2 = variant()

    @struct("main_struct")
    class MainStruct:
        something: SomeEnum | None = optional(SomeEnum)

    value = MainStruct().with_something(SomeStruct("x"))
    assert value.something == SomeEnum.option1(SomeStruct("x"))
    assert value.serialize() == {"something": {"option1": {"foo": "x"}}}

Error Paths
-----------
Errors name the entity being decoded and where it sits in the input, starting
at ``#`` for the root::

    SomeStruct.deserialize({"foo": 5})
    # ScalarTypeMismatch: failed to deserialize into 'string' at '#/foo':
    #   value is not a string.

Nested fields append ``/<name>``, list items append ``[<index>]``.

Numbers
-------
``number(behavior)`` narrows decoded numbers into one of ``u8 u16 u32 u64 i8
i16 i32 i64 f32 f64`` (``i32`` by default). Integer behaviors truncate floats
toward zero and wrap out-of-range values into their bit width. Numbers
supplied through Python constructors and setters must already fit.

Strict Modes
------------
``extra="forbid"`` rejects undeclared keys with
:class:`~blueprint.errors.UnexpectedField`. ``ambiguous="forbid"`` rejects
one-of mappings carrying more than one variant key with
:class:`~blueprint.errors.AmbiguousVariant`; by default the first declared
variant wins.
"""

from __future__ import annotations

from ._types import (
    NUMBER_BEHAVIORS,
    BooleanType,
    FieldType,
    ListType,
    NumberBehavior,
    NumberType,
    OneOfRef,
    StringType,
    StructRef,
    boolean,
    deserialize_bool,
    deserialize_list,
    deserialize_number,
    deserialize_string,
    list_of,
    number,
    string,
)
from ._utils import ROOT_PATH, AmbiguousMode, ExtraMode, schema_of
from .convert import conversion_method_name, lift
from .dump import dumps, serialize
from .one_of import OneOf, OneOfSchema, VariantSpec, one_of, variant
from .parse import deserialize, loads
from .schema import JSONSchema, schema
from .struct import FieldSpec, StructSchema, optional, required, struct

__all__ = [  # noqa: RUF022
    "NUMBER_BEHAVIORS",
    "ROOT_PATH",
    "AmbiguousMode",
    "BooleanType",
    "ExtraMode",
    "FieldSpec",
    "FieldType",
    "JSONSchema",
    "ListType",
    "NumberBehavior",
    "NumberType",
    "OneOf",
    "OneOfRef",
    "OneOfSchema",
    "StringType",
    "StructRef",
    "StructSchema",
    "VariantSpec",
    "boolean",
    "conversion_method_name",
    "deserialize",
    "deserialize_bool",
    "deserialize_list",
    "deserialize_number",
    "deserialize_string",
    "dumps",
    "lift",
    "list_of",
    "loads",
    "number",
    "one_of",
    "optional",
    "required",
    "schema",
    "schema_of",
    "serialize",
    "string",
    "struct",
    "variant",
]
