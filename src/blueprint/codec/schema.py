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

"""JSON Schema generation for declared structs and one-of types."""

from __future__ import annotations

from collections.abc import Callable
from typing import cast

from ..types import DynamicValue
from ._types import (
    BooleanType,
    FieldType,
    ListType,
    NumberType,
    StringType,
    _RefType,
)
from ._utils import DeclaredSchema, schema_of
from .one_of import OneOfSchema
from .struct import StructSchema

type JSONSchema = dict[str, DynamicValue]

UNIT_VARIANT_SCHEMA: JSONSchema = {"type": "object"}


def _schema_for_scalar(field_type: FieldType) -> JSONSchema | None:
    if isinstance(field_type, StringType):
        return {"type": "string"}
    if isinstance(field_type, BooleanType):
        return {"type": "boolean"}
    if isinstance(field_type, NumberType):
        return {"type": "number", "format": field_type.behavior}
    return None


def _schema_for_list(field_type: FieldType) -> JSONSchema | None:
    if not isinstance(field_type, ListType):
        return None
    return {"type": "array", "items": _schema_for_field_type(field_type.of)}


def _schema_for_ref(field_type: FieldType) -> JSONSchema | None:
    if not isinstance(field_type, _RefType):
        return None
    return _schema_for_declared(field_type.schema)


def _schema_for_field_type(field_type: FieldType) -> JSONSchema:
    builders: tuple[Callable[[FieldType], JSONSchema | None], ...] = (
        _schema_for_scalar,
        _schema_for_list,
        _schema_for_ref,
    )
    for builder in builders:
        schema_data = builder(field_type)
        if schema_data is not None:
            return schema_data
    raise TypeError(f"Unsupported field type {field_type!r}")  # pragma: no cover


def _with_description(schema_data: JSONSchema, description: str) -> JSONSchema:
    if description:
        return {**schema_data, "description": description}
    return schema_data


def _schema_for_struct(declared: StructSchema) -> JSONSchema:
    properties: dict[str, DynamicValue] = {
        spec.name: _with_description(
            _schema_for_field_type(spec.type), spec.description
        )
        for spec in declared.fields
    }
    schema_data: JSONSchema = {
        "title": declared.name,
        "description": declared.description,
        "type": "object",
        "properties": properties,
        "required": [spec.name for spec in declared.required_fields],
        "additionalProperties": True,
    }
    return schema_data


def _schema_for_one_of(declared: OneOfSchema) -> JSONSchema:
    alternatives: list[DynamicValue] = []
    for spec in declared.variants:
        payload_schema = (
            dict(UNIT_VARIANT_SCHEMA)
            if spec.payload is None
            else _schema_for_declared(cast(DeclaredSchema, schema_of(spec.payload)))
        )
        alternatives.append(
            {
                "type": "object",
                "properties": {
                    spec.name: _with_description(payload_schema, spec.description)
                },
                "required": [spec.name],
            }
        )
    return {
        "title": declared.name,
        "description": declared.description,
        "type": "object",
        "anyOf": alternatives,
    }


def _schema_for_declared(declared: DeclaredSchema) -> JSONSchema:
    if isinstance(declared, StructSchema):
        return _schema_for_struct(declared)
    return _schema_for_one_of(cast(OneOfSchema, declared))


def schema(cls: type[object]) -> JSONSchema:
    """Return a JSON Schema document describing a struct or one-of type.

    Nested types are inlined; field and variant descriptions are carried over.
    """

    declared = schema_of(cls) if isinstance(cls, type) else None
    if declared is None:
        raise TypeError("schema() requires a @struct or @one_of type")
    return _schema_for_declared(declared)


__all__ = ["JSONSchema", "schema"]
