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

"""Base exception hierarchy for :mod:`blueprint`."""

from __future__ import annotations

from collections.abc import Iterable


class BlueprintError(Exception):
    """Base class for all blueprint exceptions.

    Callers can catch every library-specific failure with a single handler
    while standard Python exceptions raised by misuse (``TypeError`` for a
    wrongly typed constructor argument, for instance) propagate normally.

    Example:
        Catch any blueprint-specific error::

            try:
                message = Message.deserialize(payload)
            except BlueprintError as e:
                logger.error("Rejected payload: %s", e)

    Note:
        Subclasses also inherit from standard exception types (``TypeError``,
        ``ValueError``) so existing handlers keep working.
    """


class SchemaDefinitionError(BlueprintError, TypeError):
    """Raised when a struct or one-of declaration is malformed.

    Declarations are checked once, when the ``@struct`` or ``@one_of``
    decorator runs. Common causes:

    - A dataclass field declared without ``required(...)``/``optional(...)``
    - A field or variant name that collides with a generated method
    - A payload variant whose payload is not a declared struct
    - An unknown numeric behavior passed to ``number(...)``
    """


class DeserializeError(BlueprintError, ValueError):
    """Raised when a dynamic value cannot be decoded into a declared type.

    Every instance is path-qualified: ``path`` starts at ``"#"`` for the
    root value and grows by ``"/<field>"`` or ``"/<variant>"`` per nesting
    level and ``"[<index>]"`` per list item. The rendered message always
    reads ``failed to deserialize into '<entity>' at '<path>': <reason>``.

    Example:
        Inspecting a failure::

            try:
                Message.deserialize({"id": 5})
            except DeserializeError as e:
                assert e.path == "#/id"
                assert e.entity == "string"

    Attributes:
        entity: Schema name of the type being decoded (``"message"``) or the
            scalar kind (``"string"``, ``"number"``, ``"boolean"``, ``"list"``).
        path: Location of the offending value.
        reason: Human readable description of the failure.
    """

    def __init__(self, entity: str, path: str, reason: str) -> None:
        self.entity = entity
        self.path = path
        self.reason = reason
        super().__init__(
            f"failed to deserialize into '{entity}' at '{path}': {reason}"
        )


class NotAnObject(DeserializeError):
    """The value at ``path`` is not a mapping but a struct or one-of was expected."""

    def __init__(self, entity: str, path: str) -> None:
        super().__init__(entity, path, "value is not an object.")


class MissingRequiredField(DeserializeError):
    """A struct's required field key is absent from the mapping."""

    def __init__(self, entity: str, path: str, field: str) -> None:
        self.field = field
        super().__init__(
            entity, path, f"value does not contain required field '{field}'."
        )


class NoRecognizedVariant(DeserializeError):
    """A one-of mapping contains none of the declared variant keys."""

    def __init__(self, entity: str, path: str, variants: Iterable[str]) -> None:
        self.variants = tuple(variants)
        expected = ", ".join(f"'{name}'" for name in self.variants)
        super().__init__(
            entity,
            path,
            f"value does not contain any recognized variants (expected one of {expected}).",
        )


class AmbiguousVariant(DeserializeError):
    """A one-of mapping contains several variant keys under ``ambiguous="forbid"``."""

    def __init__(self, entity: str, path: str, variants: Iterable[str]) -> None:
        self.variants = tuple(variants)
        found = ", ".join(f"'{name}'" for name in self.variants)
        super().__init__(
            entity, path, f"value contains more than one variant ({found})."
        )


class UnexpectedField(DeserializeError):
    """A mapping contains undeclared keys under ``extra="forbid"``."""

    def __init__(self, entity: str, path: str, keys: Iterable[str]) -> None:
        self.keys = tuple(sorted(keys))
        listed = ", ".join(f"'{key}'" for key in self.keys)
        super().__init__(entity, path, f"value contains unexpected keys {listed}.")


class ScalarTypeMismatch(DeserializeError):
    """A leaf value is not the expected scalar kind.

    ``entity`` is the scalar kind itself, so a non-string ``id`` field
    reports ``failed to deserialize into 'string' at '#/id'``.
    """

    def __init__(self, expected: str, path: str, reason: str | None = None) -> None:
        self.expected = expected
        article = "an" if expected[:1] in "aeiou" else "a"
        super().__init__(
            expected, path, reason or f"value is not {article} {expected}."
        )


__all__ = [
    "AmbiguousVariant",
    "BlueprintError",
    "DeserializeError",
    "MissingRequiredField",
    "NoRecognizedVariant",
    "NotAnObject",
    "ScalarTypeMismatch",
    "SchemaDefinitionError",
    "UnexpectedField",
]
