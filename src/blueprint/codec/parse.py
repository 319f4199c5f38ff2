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

"""Deserialization entry points."""

from __future__ import annotations

import json
from typing import cast

from ..errors import DeserializeError
from ..runtime.logging import StructuredLogger, get_logger
from ._utils import AmbiguousMode, ExtraMode, decode_config, schema_of

logger: StructuredLogger = get_logger(__name__, context={"component": "codec"})


def deserialize[T](
    cls: type[T],
    data: object,
    path: str = "",
    *,
    extra: ExtraMode = "ignore",
    ambiguous: AmbiguousMode = "first",
) -> T:
    """Decode a dynamic value into a declared struct or one-of type.

    ``path`` locates ``data`` inside a larger document; the empty string means
    the root (``"#"``). ``extra="forbid"`` rejects undeclared keys and
    ``ambiguous="forbid"`` rejects one-of mappings carrying several variant
    keys instead of picking the first declared variant.

    Raises:
        DeserializeError: The first failure encountered, path-qualified.
        TypeError: ``cls`` is not a declared struct or one-of type.
        ValueError: ``extra`` or ``ambiguous`` is not a supported mode.
    """

    declared = schema_of(cls) if isinstance(cls, type) else None
    if declared is None:
        raise TypeError("deserialize() requires a @struct or @one_of type")
    config = decode_config(extra=extra, ambiguous=ambiguous)

    try:
        decoded = declared.decode(data, path, config)
    except DeserializeError as error:
        logger.debug(
            "Deserialization failed.",
            event="codec.deserialize.failed",
            context={
                "target": declared.name,
                "entity": error.entity,
                "path": error.path,
                "error": type(error).__name__,
            },
        )
        raise
    return cast(T, decoded)


def loads[T](
    cls: type[T],
    text: str | bytes | bytearray,
    *,
    extra: ExtraMode = "ignore",
    ambiguous: AmbiguousMode = "first",
) -> T:
    """Parse JSON text and decode it into ``cls``.

    Malformed JSON raises :class:`json.JSONDecodeError` before decoding starts.
    """

    return deserialize(cls, json.loads(text), extra=extra, ambiguous=ambiguous)


__all__ = ["deserialize", "loads"]
