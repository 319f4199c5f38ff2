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

"""Product types: ``@struct`` declarations and their codec.

A struct is a frozen, slotted dataclass whose fields are declared with
:func:`required` or :func:`optional`::

    @struct("some_struct")
    class SomeStruct:
        \"\"\"This is the struct.\"\"\"

        foo: str = required(string(), description="This is foo")
        bar: int | None = optional(number())

Required fields are the constructor's parameters in declaration order.
Optional fields start absent (``None``) and are set through the generated
``with_<field>`` methods, which return modified copies::

    value = SomeStruct("x").with_bar(40)
    assert value.serialize() == {"foo": "x", "bar": 40}
"""

# pyright: reportPrivateUsage=false

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Final, cast, dataclass_transform

from ..dataclasses import FrozenDataclass, replace_fields
from ..errors import (
    MissingRequiredField,
    NotAnObject,
    SchemaDefinitionError,
    UnexpectedField,
)
from ..runtime.logging import StructuredLogger, get_logger
from ..types import DynamicMap, DynamicValue
from ._types import FieldType, OneOfRef, resolve_field_type
from ._utils import (
    FIELD_SPEC_KEY,
    SCHEMA_ATTR,
    _DecodeConfig,
    child_path,
    normalize_path,
    snake_case,
)
from .convert import lift
from .dump import serialize
from .parse import deserialize

logger: StructuredLogger = get_logger(__name__, context={"component": "codec"})

_GENERATED_METHODS: Final[frozenset[str]] = frozenset(
    {"new", "serialize", "deserialize"}
)


@FrozenDataclass()
class FieldSpec:
    """Declared field of a struct, in declaration order."""

    name: str
    type: FieldType
    required: bool
    description: str = ""

    @property
    def setter_name(self) -> str:
        return f"with_{self.name}"


@FrozenDataclass()
class _PendingField:
    type: FieldType
    required: bool
    description: str


@FrozenDataclass()
class StructSchema:
    """Frozen shape of a declared struct and its encode/decode rules."""

    kind: ClassVar[str] = "struct"

    cls: type[object]
    name: str
    description: str
    fields: tuple[FieldSpec, ...]

    @property
    def required_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.required)

    @property
    def optional_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if not spec.required)

    def encode(self, value: object) -> dict[str, DynamicValue]:
        """Serialize required fields always and optional fields when present."""

        encoded: dict[str, DynamicValue] = {}
        for spec in self.fields:
            current = getattr(value, spec.name)
            if current is None:
                continue
            encoded[spec.name] = spec.type.serialize(current)
        return encoded

    def decode(self, data: object, path: str, config: _DecodeConfig) -> object:
        path = normalize_path(path)
        if not isinstance(data, Mapping):
            raise NotAnObject(self.name, path)
        mapping = cast(DynamicMap, data)

        required_values: dict[str, object] = {}
        for spec in self.required_fields:
            if spec.name not in mapping:
                raise MissingRequiredField(self.name, path, spec.name)
            required_values[spec.name] = spec.type.deserialize(
                mapping[spec.name], child_path(path, spec.name), config
            )

        instance = self.cls(**required_values)

        for spec in self.optional_fields:
            if spec.name not in mapping:
                continue
            decoded = spec.type.deserialize(
                mapping[spec.name], child_path(path, spec.name), config
            )
            object.__setattr__(instance, spec.name, decoded)

        if config.extra == "forbid":
            declared = {spec.name for spec in self.fields}
            unexpected = [key for key in mapping if key not in declared]
            if unexpected:
                raise UnexpectedField(self.name, path, unexpected)

        return instance


def required(field_type: FieldType | type[object], *, description: str = "") -> Any:  # noqa: ANN401
    """Declare a required struct field (a constructor parameter)."""

    return dataclasses.field(
        metadata={
            FIELD_SPEC_KEY: _PendingField(
                resolve_field_type(field_type), True, description
            )
        }
    )


def optional(field_type: FieldType | type[object], *, description: str = "") -> Any:  # noqa: ANN401
    """Declare an optional struct field, absent until set via ``with_<field>``."""

    return dataclasses.field(
        default=None,
        init=False,
        metadata={
            FIELD_SPEC_KEY: _PendingField(
                resolve_field_type(field_type), False, description
            )
        },
    )


def _struct_schema(cls: type[object]) -> StructSchema:
    return cast(StructSchema, cls.__dict__[SCHEMA_ATTR])


def _normalize_value(declared: StructSchema, spec: FieldSpec, value: object) -> object:
    label = f"{declared.cls.__name__}.{spec.name}"
    if value is None:
        if spec.required:
            raise TypeError(f"{label} is required and cannot be None")
        return None
    if isinstance(spec.type, OneOfRef):
        lifted = lift(spec.type.cls, value)
        if lifted is None and spec.required:
            raise TypeError(
                f"{label} must be a {spec.type.cls.__name__} or convert into it, "
                f"got {type(value).__name__}"
            )
        return lifted
    return spec.type.check(value, label=label)


def _normalize_fields(self: object) -> None:
    declared = _struct_schema(type(self))
    for spec in declared.fields:
        normalized = _normalize_value(declared, spec, getattr(self, spec.name))
        object.__setattr__(self, spec.name, normalized)


def _build_post_init(user_post_init: Callable[[object], None] | None) -> Callable[[object], None]:
    if user_post_init is None:
        return _normalize_fields

    def __post_init__(self: object) -> None:
        _normalize_fields(self)
        user_post_init(self)

    return __post_init__


def _field_spec(cls: type[object], field: dataclasses.Field[object]) -> FieldSpec:
    pending = field.metadata.get(FIELD_SPEC_KEY)
    if not isinstance(pending, _PendingField):
        raise SchemaDefinitionError(
            f"{cls.__name__}.{field.name} must be declared with required(...) "
            "or optional(...)"
        )
    return FieldSpec(
        name=field.name,
        type=pending.type,
        required=pending.required,
        description=pending.description,
    )


def _check_reserved_names(cls: type[object], specs: tuple[FieldSpec, ...]) -> None:
    names = {spec.name for spec in specs}
    for spec in specs:
        if spec.name in _GENERATED_METHODS:
            raise SchemaDefinitionError(
                f"{cls.__name__}.{spec.name} collides with a generated method"
            )
        if spec.setter_name in names:
            raise SchemaDefinitionError(
                f"{cls.__name__}.{spec.setter_name} is both a field and a setter"
            )


def _build_setter(spec: FieldSpec, owner: type[object]) -> Callable[[object, object], object]:
    def setter(self: object, value: object) -> object:
        return replace_fields(self, {spec.name: value})

    setter.__name__ = spec.setter_name
    setter.__qualname__ = f"{owner.__qualname__}.{spec.setter_name}"
    setter.__doc__ = spec.description or f"Return a copy with ``{spec.name}`` replaced."
    return setter


def _new(cls: type[object], *args: object, **kwargs: object) -> object:
    """Construct a value from its required fields."""

    return cls(*args, **kwargs)


def _serialize(self: object) -> dict[str, DynamicValue]:
    """Serialize this value into a dynamic mapping."""

    return serialize(self)


def _deserialize(
    cls: type[object],
    data: object,
    path: str = "",
    *,
    extra: str = "ignore",
    ambiguous: str = "first",
) -> object:
    """Decode ``data`` into a value of this struct."""

    return deserialize(cls, data, path, extra=extra, ambiguous=ambiguous)  # type: ignore[arg-type]


def _install(cls: type[object], name: str, attribute: object) -> None:
    if name not in cls.__dict__:
        setattr(cls, name, attribute)


@dataclass_transform(frozen_default=True, field_specifiers=(required, optional))
def struct[T](
    name: str | None = None, *, description: str | None = None
) -> Callable[[type[T]], type[T]]:
    """Declare a struct.

    ``name`` is the schema name used in error messages and conversion method
    names; it defaults to the snake_case class name. ``description`` defaults
    to the class docstring.
    """

    def decorator(cls: type[T]) -> type[T]:
        if cls.__dict__.get(SCHEMA_ATTR) is not None:
            raise SchemaDefinitionError(f"{cls.__name__} is already declared")
        schema_name = name or snake_case(cls.__name__)
        doc = cls.__dict__.get("__doc__")
        resolved_description = (
            description if description is not None else inspect.cleandoc(doc or "")
        )

        user_post_init = cast(
            Callable[[object], None] | None, cls.__dict__.get("__post_init__")
        )
        type.__setattr__(cls, "__post_init__", _build_post_init(user_post_init))

        dataclass_cls = FrozenDataclass()(cls)
        specs = tuple(
            _field_spec(dataclass_cls, field)
            for field in dataclasses.fields(cast(Any, dataclass_cls))
        )
        _check_reserved_names(dataclass_cls, specs)

        declared = StructSchema(
            cls=dataclass_cls,
            name=schema_name,
            description=resolved_description,
            fields=specs,
        )
        type.__setattr__(dataclass_cls, SCHEMA_ATTR, declared)

        for spec in specs:
            _install(dataclass_cls, spec.setter_name, _build_setter(spec, dataclass_cls))
        _install(dataclass_cls, "new", classmethod(_new))
        _install(dataclass_cls, "serialize", _serialize)
        _install(dataclass_cls, "deserialize", classmethod(_deserialize))

        logger.debug(
            "Struct declared.",
            event="codec.schema.declared",
            context={
                "kind": declared.kind,
                "name": schema_name,
                "fields": [spec.name for spec in specs],
            },
        )
        return dataclass_cls

    return decorator


__all__ = ["FieldSpec", "StructSchema", "optional", "required", "struct"]
