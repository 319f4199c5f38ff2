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

"""Conversion of struct values into related one-of types.

A struct converts into a one-of type ``T`` when it exposes a callable named
``into_<T's schema name>``. ``@one_of`` installs that method on every struct
carried by a payload variant, so ``SomeStruct("x").into_some_enum()`` returns
``SomeEnum.option1(SomeStruct("x"))``. Structs may define the method
themselves to pick a different variant; the decorator leaves it untouched.
"""

from __future__ import annotations

from typing import cast

from ..dbc import require
from ..runtime.logging import StructuredLogger, get_logger
from ._utils import schema_of

logger: StructuredLogger = get_logger(__name__, context={"component": "codec"})


def _declared_name(target: type[object]) -> str:
    return cast(str, getattr(schema_of(target), "name"))


def _is_one_of_type(target: object, thing: object) -> tuple[bool, str]:
    declared = schema_of(target) if isinstance(target, type) else None
    return (
        getattr(declared, "kind", None) == "one_of",
        f"{target!r} is not a @one_of type",
    )


def conversion_method_name(target: type[object]) -> str:
    """Return the capability method name for ``target`` (``into_some_enum``)."""

    return f"into_{_declared_name(target)}"


@require(_is_one_of_type)
def lift[T](target: type[T], thing: object) -> T | None:
    """Return ``thing`` as a ``target`` value, or ``None`` when it cannot convert.

    ``target`` instances pass through unchanged; values exposing the
    conversion capability are converted; anything else yields ``None``.
    """

    if isinstance(thing, target):
        return thing
    converter = getattr(thing, conversion_method_name(target), None)
    if callable(converter):
        converted = converter()
        if not isinstance(converted, target):
            raise TypeError(
                f"{type(thing).__name__}.{conversion_method_name(target)}() returned "
                f"{type(converted).__name__}, expected {target.__name__}"
            )
        return converted
    if thing is not None:
        logger.debug(
            "Value does not convert into one-of type.",
            event="codec.convert.unrelated",
            context={
                "target": _declared_name(target),
                "value_type": type(thing).__name__,
            },
        )
    return None


def install_conversion(
    source: type[object], target: type[object], variant_name: str
) -> bool:
    """Give ``source`` an ``into_<target>`` method wrapping it in ``variant_name``.

    Returns ``False`` when ``source`` already exposes the method.
    """

    method_name = conversion_method_name(target)
    if getattr(source, method_name, None) is not None:
        return False

    def into(self: object) -> object:
        return getattr(target, variant_name)(self)

    into.__name__ = method_name
    into.__qualname__ = f"{source.__qualname__}.{method_name}"
    into.__doc__ = (
        f"Wrap this value in the ``{variant_name}`` variant of "
        f":class:`{target.__name__}`."
    )
    setattr(source, method_name, into)
    return True


__all__ = ["conversion_method_name", "install_conversion", "lift"]
