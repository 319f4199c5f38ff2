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

"""Tests for the internal design-by-contract helpers."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from blueprint import dbc
from blueprint.codec.one_of import OneOfSchema
from blueprint.dbc import (
    dbc_active,
    dbc_enabled,
    disable_dbc,
    enable_dbc,
    ensure,
    invariant,
    require,
)
from tests.codec._fixtures import MessageIntent, SomeEnum, SomeStruct

pytestmark = pytest.mark.core


@pytest.fixture(autouse=True)
def reset_dbc_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("BLUEPRINT_DBC", raising=False)
    previous = dbc._forced_state
    dbc._forced_state = None
    try:
        yield
    finally:
        dbc._forced_state = previous


def test_contracts_are_inactive_by_default() -> None:
    assert dbc_active() is False


@pytest.mark.parametrize(
    ("value", "expected"),
    [("1", True), ("true", True), ("yes", True), ("0", False), ("off", False), ("", False)],
)
def test_env_flag_toggles_contracts(
    monkeypatch: pytest.MonkeyPatch, value: str, expected: bool
) -> None:
    monkeypatch.setenv("BLUEPRINT_DBC", value)

    assert dbc_active() is expected


def test_forced_state_overrides_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BLUEPRINT_DBC", "1")
    disable_dbc()
    assert dbc_active() is False

    enable_dbc()
    assert dbc_active() is True


def test_dbc_enabled_restores_previous_state() -> None:
    with dbc_enabled():
        assert dbc_active() is True
        with dbc_enabled(active=False):
            assert dbc_active() is False
        assert dbc_active() is True
    assert dbc_active() is False


def test_require_allows_valid_inputs_and_rejects_invalid_ones() -> None:
    @require(lambda value: value > 0)
    def square(value: int) -> int:
        return value * value

    assert square(-2) == 4

    with dbc_enabled():
        assert square(3) == 9
        with pytest.raises(AssertionError, match="require contract for .*square"):
            square(-1)


def test_ensure_receives_result_and_reports_details() -> None:
    @ensure(lambda value, result: (result >= value, "result shrank"))
    def halve(value: int) -> int:
        return value // 2

    with dbc_enabled(), pytest.raises(AssertionError, match="Details: result shrank"):
        halve(4)


def test_predicate_errors_become_assertion_errors() -> None:
    @require(lambda value: value.missing)
    def identity(value: object) -> object:
        return value

    with dbc_enabled(), pytest.raises(AssertionError, match="raised AttributeError"):
        identity(object())


def test_empty_tuple_results_are_rejected() -> None:
    @require(lambda: ())
    def noop() -> None:
        return None

    with dbc_enabled(), pytest.raises(TypeError, match="empty tuples"):
        noop()


def test_decorators_require_predicates() -> None:
    with pytest.raises(ValueError, match="at least one predicate"):
        require()
    with pytest.raises(ValueError, match="at least one predicate"):
        ensure()
    with pytest.raises(ValueError, match="at least one predicate"):
        invariant()


def test_invariant_checks_init_and_public_methods() -> None:
    @invariant(lambda self: self.count >= 0)
    class Counter:
        def __init__(self, count: int) -> None:
            self.count = count

        def decrement(self) -> None:
            self.count -= 1

        @classmethod
        def zero(cls) -> Counter:
            return cls(0)

    with dbc_enabled():
        counter = Counter.zero()
        with pytest.raises(AssertionError, match="invariant contract"):
            counter.decrement()
        with pytest.raises(AssertionError, match="invariant contract"):
            Counter(-1)


def test_one_of_invariant_holds_for_valid_values() -> None:
    with dbc_enabled():
        assert SomeEnum.option1(SomeStruct("x")).serialize() == {"option1": {"foo": "x"}}
        assert MessageIntent.deserialize({"create": {}}) == MessageIntent.create()


def test_one_of_invariant_detects_inconsistent_state() -> None:
    value = SomeEnum.option2()
    object.__setattr__(value, "_value", SomeStruct("x"))

    assert value.serialize() == {"option2": {"foo": "x"}}

    with dbc_enabled(), pytest.raises(AssertionError, match="exactly one active variant"):
        value.serialize()


def test_one_of_encode_postcondition_passes_for_single_entry() -> None:
    declared = SomeEnum.__dict__["__blueprint__"]
    assert isinstance(declared, OneOfSchema)

    with dbc_enabled():
        assert declared.encode(SomeEnum.option2()) == {"option2": {}}
