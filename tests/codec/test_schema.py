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

from __future__ import annotations

import json

import pytest

from blueprint.codec import schema
from tests.codec._fixtures import MainStruct, Message, SensorBatch, SomeEnum, SomeStruct, as_dict

pytestmark = pytest.mark.core


def test_struct_schema_shape() -> None:
    assert schema(SomeStruct) == {
        "title": "some_struct",
        "description": "This is the struct",
        "type": "object",
        "properties": {
            "foo": {"type": "string", "description": "This is foo"},
            "bar": {"type": "number", "format": "i32", "description": "This is the title"},
        },
        "required": ["foo"],
        "additionalProperties": True,
    }


def test_one_of_schema_lists_variants_in_order() -> None:
    schema_data = schema(SomeEnum)

    assert schema_data["title"] == "some_enum"
    assert schema_data["type"] == "object"
    alternatives = schema_data["anyOf"]
    assert isinstance(alternatives, list)
    first, second = (as_dict(item) for item in alternatives)
    assert first["required"] == ["option1"]
    option1 = as_dict(as_dict(first["properties"])["option1"])
    assert option1["title"] == "some_struct"
    assert option1["description"] == "This is option 1"
    assert second == {
        "type": "object",
        "properties": {
            "option2": {"type": "object", "description": "This is option 2"}
        },
        "required": ["option2"],
    }


def test_nested_types_are_inlined() -> None:
    properties = as_dict(schema(MainStruct)["properties"])
    something = as_dict(properties["something"])

    assert something["title"] == "some_enum"
    assert something["description"] == "This is the title"
    assert schema(MainStruct)["required"] == []


def test_list_fields_render_as_arrays() -> None:
    properties = as_dict(schema(SensorBatch)["properties"])
    readings = as_dict(properties["readings"])
    items = as_dict(readings["items"])

    assert readings["type"] == "array"
    assert items["title"] == "sensor_reading"
    samples = as_dict(as_dict(items["properties"])["samples"])
    assert samples == {"type": "array", "items": {"type": "number", "format": "f64"}}
    calibrated = as_dict(as_dict(items["properties"])["calibrated"])
    assert calibrated == {"type": "boolean"}


def test_schema_is_json_serializable() -> None:
    text = json.dumps(schema(Message))

    assert json.loads(text)["properties"]["intent"]["title"] == "message_intent"


def test_schema_requires_declared_types() -> None:
    with pytest.raises(TypeError, match="requires a @struct or @one_of type"):
        schema(dict)
