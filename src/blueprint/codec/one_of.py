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

"""Sum types: ``@one_of`` declarations and their codec.

A one-of type is a closed set of named variants. Unit variants carry nothing;
payload variants carry exactly one struct value::

    @one_of("some_enum")
    class SomeEnum:
        \"\"\"This is the enum.\"\"\"

        option1 = variant(SomeStruct, description="This is option 1")
        option2 = variant(description="This is option 2")

    SomeEnum.option1(SomeStruct("x")).serialize()  # {"option1": {"foo": "x"}}
    SomeEnum.option2().serialize()                 # {"option2": {}}

The variant name is the mapping key; there is no separate type tag. Decoding
probes variant keys in declaration order and the first present key wins.
"""

# pyright: reportPrivateUsage=false

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import FrozenInstanceError
from typing import Any, ClassVar, Final, Self, cast

from ..dataclasses import FrozenDataclass
from ..dbc import ensure, invariant
from ..errors import (
    AmbiguousVariant,
    NoRecognizedVariant,
    NotAnObject,
    SchemaDefinitionError,
    UnexpectedField,
)
from ..runtime.logging import StructuredLogger, get_logger
from ..types import DynamicMap, DynamicValue
from ._utils import (
    SCHEMA_ATTR,
    AmbiguousMode,
    ExtraMode,
    _DecodeConfig,
    child_path,
    normalize_path,
    schema_of,
    snake_case,
)
from .convert import install_conversion, lift
from .dump import serialize
from .parse import deserialize

logger: StructuredLogger = get_logger(__name__, context={"component": "codec"})

_RESERVED_NAMES: Final[frozenset[str]] = frozenset(
    {"variant", "value", "from_", "serialize", "deserialize"}
)


@FrozenDataclass()
class VariantSpec:
    """Declared variant of a one-of type, in declaration order."""

    name: str
    payload: type[object] | None
    description: str = ""

    @property
    def is_unit(self) -> bool:
        return self.payload is None


@FrozenDataclass()
class _PendingVariant:
    payload: type[object] | None
    description: str


def variant(payload: type[object] | None = None, *, description: str = "") -> Any:  # noqa: ANN401
    """Declare a variant; pass a ``@struct`` class to make it a payload variant."""

    return _PendingVariant(payload, description)


def _single_entry(self: OneOfSchema, value: object, result: DynamicMap) -> tuple[bool, str]:
    return len(result) == 1, f"{self.name} must serialize to exactly one entry"


@FrozenDataclass()
class OneOfSchema:
    """Frozen shape of a declared one-of type and its encode/decode rules.

    ``variants`` is ordered; that order is the decode probing order.
    """

    kind: ClassVar[str] = "one_of"

    cls: type[object]
    name: str
    description: str
    variants: tuple[VariantSpec, ...]

    @property
    def variant_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.variants)

    def variant_named(self, name: str) -> VariantSpec | None:
        for spec in self.variants:
            if spec.name == name:
                return spec
        return None

    @ensure(_single_entry)
    def encode(self, value: object) -> dict[str, DynamicValue]:
        active = cast(OneOf, value)
        if active.value is None:
            return {active.variant: {}}
        return {active.variant: serialize(active.value)}

    def decode(self, data: object, path: str, config: _DecodeConfig) -> object:
        path = normalize_path(path)
        if not isinstance(data, Mapping):
            raise NotAnObject(self.name, path)
        mapping = cast(DynamicMap, data)

        present = [spec for spec in self.variants if spec.name in mapping]
        if not present:
            raise NoRecognizedVariant(self.name, path, self.variant_names)
        if len(present) > 1 and config.ambiguous == "forbid":
            raise AmbiguousVariant(self.name, path, [spec.name for spec in present])

        selected = present[0]
        if selected.payload is None:
            instance = self.cls(selected.name)
        else:
            payload_schema = schema_of(selected.payload)
            assert payload_schema is not None  # nosec B101 - checked at declaration
            payload = payload_schema.decode(
                mapping[selected.name], child_path(path, selected.name), config
            )
            instance = self.cls(selected.name, payload)

        if config.extra == "forbid":
            unexpected = [key for key in mapping if key not in self.variant_names]
            if unexpected:
                raise UnexpectedField(self.name, path, unexpected)

        return instance


def _one_of_schema(cls: type[object]) -> OneOfSchema:
    return cast(OneOfSchema, cls.__dict__[SCHEMA_ATTR])


def _exactly_one_variant_active(self: OneOf) -> tuple[bool, str]:
    spec = _one_of_schema(type(self)).variant_named(self.variant)
    consistent = spec is not None and spec.is_unit == (self.value is None)
    return consistent, f"{type(self).__name__} must have exactly one active variant"


@invariant(_exactly_one_variant_active)
class OneOf:
    """Base class of every ``@one_of`` type.

    Instances are immutable and hold exactly one active variant: its name in
    :attr:`variant` and, for payload variants, the struct in :attr:`value`.
    Build them through the generated per-variant classmethods rather than the
    constructor.
    """

    __slots__ = ("_value", "_variant")
    __match_args__ = ("variant", "value")

    _variant: str
    _value: object | None

    def __init__(self, variant: str, value: object | None = None) -> None:
        cls = type(self)
        declared = cls.__dict__.get(SCHEMA_ATTR)
        if not isinstance(declared, OneOfSchema):
            raise TypeError(f"{cls.__name__} is not declared with @one_of")
        spec = declared.variant_named(variant)
        if spec is None:
            raise ValueError(f"{cls.__name__} has no variant {variant!r}")
        if spec.payload is None:
            if value is not None:
                raise TypeError(f"{cls.__name__}.{variant}() takes no payload")
        elif not isinstance(value, spec.payload):
            raise TypeError(
                f"{cls.__name__}.{variant}() expects a {spec.payload.__name__}, "
                f"got {type(value).__name__}"
            )
        object.__setattr__(self, "_variant", variant)
        object.__setattr__(self, "_value", value)

    @property
    def variant(self) -> str:
        """Name of the active variant."""
        return self._variant

    @property
    def value(self) -> object | None:
        """Payload of the active variant, ``None`` for unit variants."""
        return self._value

    @classmethod
    def from_(cls, thing: object) -> Self | None:
        """Return ``thing`` as this type, converting structs; ``None`` otherwise."""

        return lift(cls, thing)

    def serialize(self) -> dict[str, DynamicValue]:
        """Serialize into a single-entry mapping keyed by the variant name."""

        return serialize(self)

    @classmethod
    def deserialize(
        cls,
        data: object,
        path: str = "",
        *,
        extra: ExtraMode = "ignore",
        ambiguous: AmbiguousMode = "first",
    ) -> Self:
        """Decode ``data`` by probing variant keys in declaration order."""

        return deserialize(cls, data, path, extra=extra, ambiguous=ambiguous)

    def __setattr__(self, name: str, value: object) -> None:
        raise FrozenInstanceError(f"cannot assign to field {name!r}")

    def __delattr__(self, name: str) -> None:
        raise FrozenInstanceError(f"cannot delete field {name!r}")

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        other_one_of = cast(OneOf, other)
        return (self._variant, self._value) == (
            other_one_of._variant,
            other_one_of._value,
        )

    def __hash__(self) -> int:
        return hash((type(self), self._variant, self._value))

    def __repr__(self) -> str:
        payload = "" if self._value is None else repr(self._value)
        return f"{type(self).__name__}.{self._variant}({payload})"

    def __reduce__(self) -> tuple[type[Self], tuple[str, object | None]]:
        return type(self), (self._variant, self._value)


def _resolve_payload(
    cls: type[object], attribute: str, payload: type[object] | None
) -> type[object] | None:
    if payload is None:
        return None
    declared = schema_of(payload) if isinstance(payload, type) else None
    if getattr(declared, "kind", None) != "struct":
        raise SchemaDefinitionError(
            f"{cls.__name__}.{attribute} payload must be a @struct class, got {payload!r}"
        )
    return payload


def _build_constructor(spec: VariantSpec, owner: type[object]) -> Callable[..., object]:
    if spec.payload is None:

        def construct_unit(cls: type[OneOf]) -> OneOf:
            return cls(spec.name)

        construct: Callable[..., object] = construct_unit
    else:

        def construct_payload(cls: type[OneOf], value: object) -> OneOf:
            return cls(spec.name, value)

        construct = construct_payload

    construct.__name__ = spec.name
    construct.__qualname__ = f"{owner.__qualname__}.{spec.name}"
    construct.__doc__ = spec.description or f"Build the ``{spec.name}`` variant."
    return construct


def one_of[T](
    name: str | None = None, *, description: str | None = None
) -> Callable[[type[T]], type[T]]:
    """Declare a one-of type.

    ``name`` defaults to the snake_case class name and ``description`` to the
    class docstring. The returned class derives from :class:`OneOf`; every
    struct carried by a payload variant gains an ``into_<name>()`` method.
    """

    def decorator(cls: type[T]) -> type[T]:
        if cls.__bases__ != (object,):
            raise SchemaDefinitionError(
                f"{cls.__name__} must not declare base classes; @one_of provides OneOf"
            )
        schema_name = name or snake_case(cls.__name__)
        doc = cls.__dict__.get("__doc__")
        resolved_description = (
            description if description is not None else inspect.cleandoc(doc or "")
        )

        specs: list[VariantSpec] = []
        namespace: dict[str, object] = {"__slots__": (), "__qualname__": cls.__qualname__}
        for attribute, member in cls.__dict__.items():
            if attribute in {"__dict__", "__weakref__"}:
                continue
            if not isinstance(member, _PendingVariant):
                namespace[attribute] = member
                continue
            if attribute in _RESERVED_NAMES or attribute.startswith("_"):
                raise SchemaDefinitionError(
                    f"{cls.__name__}.{attribute} is not a valid variant name"
                )
            specs.append(
                VariantSpec(
                    name=attribute,
                    payload=_resolve_payload(cls, attribute, member.payload),
                    description=member.description,
                )
            )
        if not specs:
            raise SchemaDefinitionError(f"{cls.__name__} declares no variants")

        one_of_cls = type(cls.__name__, (OneOf,), namespace)
        declared = OneOfSchema(
            cls=one_of_cls,
            name=schema_name,
            description=resolved_description,
            variants=tuple(specs),
        )
        type.__setattr__(one_of_cls, SCHEMA_ATTR, declared)

        for spec in declared.variants:
            setattr(one_of_cls, spec.name, classmethod(_build_constructor(spec, one_of_cls)))
        for spec in declared.variants:
            if spec.payload is not None:
                _ = install_conversion(spec.payload, one_of_cls, spec.name)

        logger.debug(
            "One-of declared.",
            event="codec.schema.declared",
            context={
                "kind": declared.kind,
                "name": schema_name,
                "variants": list(declared.variant_names),
            },
        )
        return cast(type[T], one_of_cls)

    return decorator


__all__ = ["OneOf", "OneOfSchema", "VariantSpec", "one_of", "variant"]
