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

"""Field types and scalar coercers.

A field type knows three things about the values of one field: how to check a
Python value supplied by a caller, how to serialize it into the dynamic value
model, and how to decode it back at a given path. Scalars never coerce across
kinds on decode: a string stays a string, a number stays a number.
"""

# pyright: reportPrivateUsage=false

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from struct import pack, unpack
from typing import ClassVar, Final, Literal, Protocol, cast, get_args

from ..dataclasses import FrozenDataclass
from ..errors import ScalarTypeMismatch, SchemaDefinitionError
from ..types import DynamicValue
from ._utils import SCHEMA_ATTR, DeclaredSchema, _DecodeConfig, item_path

NumberBehavior = Literal[
    "u8", "u16", "u32", "u64", "i8", "i16", "i32", "i64", "f32", "f64"
]

NUMBER_BEHAVIORS: Final[tuple[str, ...]] = get_args(NumberBehavior)
_INTEGER_WIDTHS: Final[Mapping[str, tuple[int, bool]]] = {
    "u8": (8, False),
    "u16": (16, False),
    "u32": (32, False),
    "u64": (64, False),
    "i8": (8, True),
    "i16": (16, True),
    "i32": (32, True),
    "i64": (64, True),
}


class FieldType(Protocol):
    """Codec operations shared by every field type."""

    kind: ClassVar[str]

    def check(self, value: object, *, label: str) -> object:
        """Validate a caller-supplied value, returning the value to store."""
        ...

    def serialize(self, value: object) -> DynamicValue:
        """Convert a stored value into the dynamic value model."""
        ...

    def deserialize(self, value: object, path: str, config: _DecodeConfig) -> object:
        """Decode a dynamic value found at ``path``."""
        ...


def deserialize_string(value: object, path: str) -> str:
    if not isinstance(value, str):
        raise ScalarTypeMismatch("string", path)
    return value


def deserialize_bool(value: object, path: str) -> bool:
    if not isinstance(value, bool):
        raise ScalarTypeMismatch("boolean", path)
    return value


def deserialize_number(
    value: object, path: str, behavior: NumberBehavior = "f64"
) -> int | float:
    """Decode a dynamic number, narrowing it into ``behavior``.

    Integer behaviors truncate toward zero and wrap into their bit width
    without range checks. ``f32`` rounds through single precision.
    """

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScalarTypeMismatch("number", path)
    width = _INTEGER_WIDTHS.get(behavior)
    if width is None:
        return _to_float(value, behavior)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ScalarTypeMismatch("number", path, "value is not a finite number.")
        value = math.trunc(value)
    return _wrap_integer(value, *width)


def deserialize_list[ItemT](
    value: object,
    path: str,
    deserialize_item: Callable[[object, str], ItemT],
) -> tuple[ItemT, ...]:
    if not _is_list_like(value):
        raise ScalarTypeMismatch("list", path)
    items = cast(Sequence[object], value)
    return tuple(
        deserialize_item(item, item_path(path, index))
        for index, item in enumerate(items)
    )


def _is_list_like(value: object) -> bool:
    return isinstance(value, (list, tuple))


def _wrap_integer(value: int, bits: int, signed: bool) -> int:
    wrapped = value & ((1 << bits) - 1)
    if signed and wrapped >= 1 << (bits - 1):
        wrapped -= 1 << bits
    return wrapped


def _integer_bounds(bits: int, signed: bool) -> tuple[int, int]:
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def _to_float(value: int | float, behavior: str) -> float:
    try:
        result = float(value)
    except OverflowError:
        result = math.inf if value > 0 else -math.inf
    if behavior == "f32":
        try:
            result = cast(float, unpack("<f", pack("<f", result))[0])
        except OverflowError:
            result = math.copysign(math.inf, result)
    return result


def _type_name(value: object) -> str:
    return type(value).__name__


@FrozenDataclass()
class StringType:
    kind: ClassVar[str] = "string"

    def check(self, value: object, *, label: str) -> object:
        if not isinstance(value, str):
            raise TypeError(f"{label} must be a str, got {_type_name(value)}")
        return value

    def serialize(self, value: object) -> DynamicValue:
        return cast(str, value)

    def deserialize(self, value: object, path: str, config: _DecodeConfig) -> object:
        return deserialize_string(value, path)


@FrozenDataclass()
class BooleanType:
    kind: ClassVar[str] = "boolean"

    def check(self, value: object, *, label: str) -> object:
        if not isinstance(value, bool):
            raise TypeError(f"{label} must be a bool, got {_type_name(value)}")
        return value

    def serialize(self, value: object) -> DynamicValue:
        return cast(bool, value)

    def deserialize(self, value: object, path: str, config: _DecodeConfig) -> object:
        return deserialize_bool(value, path)


@FrozenDataclass()
class NumberType:
    """Number field narrowed into ``behavior`` (``i32`` by default)."""

    kind: ClassVar[str] = "number"

    behavior: NumberBehavior = "i32"

    def __post_init__(self) -> None:
        if self.behavior not in NUMBER_BEHAVIORS:
            raise SchemaDefinitionError(
                f"Unknown number behavior {self.behavior!r}; "
                f"expected one of {', '.join(NUMBER_BEHAVIORS)}"
            )

    @property
    def is_integer(self) -> bool:
        return self.behavior in _INTEGER_WIDTHS

    def check(self, value: object, *, label: str) -> object:
        if isinstance(value, bool):
            raise TypeError(f"{label} must be a number, got bool")
        width = _INTEGER_WIDTHS.get(self.behavior)
        if width is None:
            if not isinstance(value, (int, float)):
                raise TypeError(f"{label} must be a number, got {_type_name(value)}")
            return _to_float(value, self.behavior)
        if not isinstance(value, int):
            raise TypeError(f"{label} must be an int, got {_type_name(value)}")
        low, high = _integer_bounds(*width)
        if not low <= value <= high:
            raise ValueError(
                f"{label} must fit in {self.behavior} ({low}..{high}), got {value}"
            )
        return value

    def serialize(self, value: object) -> DynamicValue:
        return cast(int | float, value)

    def deserialize(self, value: object, path: str, config: _DecodeConfig) -> object:
        return deserialize_number(value, path, self.behavior)


@FrozenDataclass()
class ListType:
    """Homogeneous list field; values are stored as tuples."""

    kind: ClassVar[str] = "list"

    of: FieldType

    def check(self, value: object, *, label: str) -> object:
        if not _is_list_like(value):
            raise TypeError(f"{label} must be a list or tuple, got {_type_name(value)}")
        items = cast(Sequence[object], value)
        return tuple(
            self.of.check(item, label=item_path(label, index))
            for index, item in enumerate(items)
        )

    def serialize(self, value: object) -> DynamicValue:
        items = cast(Sequence[object], value)
        return [self.of.serialize(item) for item in items]

    def deserialize(self, value: object, path: str, config: _DecodeConfig) -> object:
        return deserialize_list(
            value, path, lambda item, at: self.of.deserialize(item, at, config)
        )


@FrozenDataclass()
class _RefType:
    kind: ClassVar[str] = "ref"

    cls: type[object]

    @property
    def schema(self) -> DeclaredSchema:
        return cast(DeclaredSchema, self.cls.__dict__[SCHEMA_ATTR])

    def check(self, value: object, *, label: str) -> object:
        if not isinstance(value, self.cls):
            raise TypeError(
                f"{label} must be a {self.cls.__name__}, got {_type_name(value)}"
            )
        return value

    def serialize(self, value: object) -> DynamicValue:
        return self.schema.encode(value)

    def deserialize(self, value: object, path: str, config: _DecodeConfig) -> object:
        return self.schema.decode(value, path, config)


@FrozenDataclass()
class StructRef(_RefType):
    """Field holding a nested struct value."""

    kind: ClassVar[str] = "struct"


@FrozenDataclass()
class OneOfRef(_RefType):
    """Field holding a nested one-of value."""

    kind: ClassVar[str] = "one_of"


def string() -> StringType:
    return StringType()


def number(behavior: NumberBehavior = "i32") -> NumberType:
    return NumberType(behavior)


def boolean() -> BooleanType:
    return BooleanType()


def list_of(of: FieldType | type[object]) -> ListType:
    return ListType(resolve_field_type(of))


def resolve_field_type(target: object) -> FieldType:
    """Accept a field type instance or a declared struct/one-of class."""

    if isinstance(target, (StringType, BooleanType, NumberType, ListType, _RefType)):
        return target
    if isinstance(target, type):
        declared = target.__dict__.get(SCHEMA_ATTR)
        kind = getattr(declared, "kind", None)
        if kind == StructRef.kind:
            return StructRef(target)
        if kind == OneOfRef.kind:
            return OneOfRef(target)
    raise SchemaDefinitionError(
        f"{target!r} is not a field type; use string(), number(), boolean(), "
        "list_of(...) or a class declared with @struct/@one_of"
    )


__all__ = [  # noqa: RUF022
    "NUMBER_BEHAVIORS",
    "BooleanType",
    "FieldType",
    "ListType",
    "NumberBehavior",
    "NumberType",
    "OneOfRef",
    "StringType",
    "StructRef",
    "boolean",
    "deserialize_bool",
    "deserialize_list",
    "deserialize_number",
    "deserialize_string",
    "list_of",
    "number",
    "resolve_field_type",
    "string",
]
