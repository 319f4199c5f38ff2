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

"""Tests for frozen dataclass helpers."""

from __future__ import annotations

from dataclasses import FrozenInstanceError, field

import pytest

from blueprint.dataclasses import FrozenDataclass, replace_fields

pytestmark = pytest.mark.core


def test_frozen_dataclass_defaults_to_frozen_and_slotted() -> None:
    @FrozenDataclass()
    class Simple:
        value: int
        label: str = "default"

    simple = Simple(42)
    assert simple.value == 42
    assert simple.label == "default"
    assert not hasattr(simple, "__dict__")

    with pytest.raises(FrozenInstanceError):
        simple.value = 1  # type: ignore[misc]


def test_dataclass_options_passthrough() -> None:
    """Custom dataclass options are respected."""

    @FrozenDataclass(frozen=False, slots=False, order=True)
    class Mutable:
        value: int

    m = Mutable(1)
    m.value = 2
    assert m.value == 2
    assert not hasattr(m, "__slots__")

    assert Mutable(1) < Mutable(2)  # type: ignore[operator]


def test_replace_fields_returns_modified_copy() -> None:
    @FrozenDataclass()
    class Pair:
        left: int
        right: int | None = field(default=None, init=False)

    original = Pair(1)
    updated = replace_fields(original, {"right": 2})

    assert original.right is None
    assert updated.left == 1
    assert updated.right == 2
    assert updated is not original


def test_replace_fields_runs_post_init() -> None:
    calls: list[int] = []

    @FrozenDataclass()
    class Checked:
        value: int

        def __post_init__(self) -> None:
            calls.append(self.value)
            if self.value < 0:
                raise ValueError("value must be non-negative")

    checked = Checked(1)
    assert replace_fields(checked, {"value": 5}).value == 5
    assert calls == [1, 5]

    with pytest.raises(ValueError, match="non-negative"):
        replace_fields(checked, {"value": -1})


def test_replace_fields_rejects_unknown_fields() -> None:
    @FrozenDataclass()
    class Target:
        value: int

    with pytest.raises(TypeError, match=r"unexpected field\(s\): other, unknown"):
        replace_fields(Target(1), {"unknown": 99, "other": 1})
