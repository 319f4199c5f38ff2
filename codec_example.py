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

"""Message router built on the blueprint codec.

Reads one JSON message per line from stdin, decodes it strictly and prints a
routing decision or the path-qualified decode error.

    echo '{"id": "m-1", "intent": {"create": {}}}' | python codec_example.py
"""

from __future__ import annotations

import json
import sys
from collections.abc import Iterable, Iterator

from blueprint.codec import loads, one_of, optional, required, schema, string, struct, variant
from blueprint.errors import DeserializeError
from blueprint.runtime import configure_logging, get_logger

logger = get_logger(__name__, context={"component": "example"})


@one_of("message_intent")
class MessageIntent:
    """Message intents are the primary way to categorize messages."""

    create = variant(description="Create a new entity")
    delete = variant(description="Delete an entity")


@struct("message")
class Message:
    """A message that can be sent between processes."""

    id: str = required(string(), description="The id of the message that can be sent")
    intent: MessageIntent | None = optional(
        MessageIntent,
        description="The intention of the message. Should be present unless it is a ping.",
    )


def route(message: Message) -> str:
    match message.intent:
        case None:
            return f"{message.id}: ping"
        case MessageIntent(variant=name):
            return f"{message.id}: {name}"
    raise AssertionError("unreachable")  # pragma: no cover


def process_lines(lines: Iterable[str]) -> Iterator[str]:
    """Yield one output line per non-blank input line."""

    for line in lines:
        if not line.strip():
            continue
        try:
            message = loads(Message, line, extra="forbid")
        except json.JSONDecodeError as error:
            yield f"invalid json: {error.msg}"
            continue
        except DeserializeError as error:
            logger.info(
                "Rejected message.",
                event="example.message.rejected",
                context={"path": error.path},
            )
            yield f"rejected: {error}"
            continue
        yield route(message)


def main() -> None:
    configure_logging()
    if "--schema" in sys.argv[1:]:
        print(json.dumps(schema(Message), indent=2))
        return
    for output in process_lines(sys.stdin):
        print(output)


if __name__ == "__main__":
    main()
