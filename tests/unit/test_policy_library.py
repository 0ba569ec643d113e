"""Tests for the resolution policy combinators."""

from __future__ import annotations

import pytest

from composable.core.enums import Policy
from composable.core.errors import CompositionError, UnsupportedPolicy
from composable.policy import (
    POLICIES,
    after,
    apply_policy,
    around,
    before,
    discard,
    overwrite,
    to_policy,
)


class Recorder:
    """Records calls made through ``existing`` and ``incoming`` methods."""

    def __init__(self) -> None:
        self.log: list[tuple[str, tuple, dict]] = []

    def method(self, label: str, result: object):
        def fn(receiver, *args, **kwargs):
            self.log.append((label, args, kwargs))
            return result

        fn.__name__ = label
        return fn


@pytest.fixture
def rec() -> Recorder:
    return Recorder()


class TestOverwriteDiscard:
    def test_overwrite_uses_incoming(self, rec):
        existing, incoming = rec.method("existing", 1), rec.method("incoming", 2)
        assert overwrite(existing, incoming) is incoming

    def test_discard_keeps_existing(self, rec):
        existing, incoming = rec.method("existing", 1), rec.method("incoming", 2)
        assert discard(existing, incoming) is existing


class TestBefore:
    def test_incoming_runs_first_existing_result_returned(self, rec):
        combined = before(rec.method("existing", "E"), rec.method("incoming", "I"))
        assert combined("receiver", 1, key="v") == "E"
        assert rec.log == [
            ("incoming", (1,), {"key": "v"}),
            ("existing", (1,), {"key": "v"}),
        ]

    def test_keeps_existing_name(self, rec):
        combined = before(rec.method("existing", 1), rec.method("incoming", 2))
        assert combined.__name__ == "existing"


class TestAfter:
    def test_existing_runs_first_incoming_result_returned(self, rec):
        combined = after(rec.method("existing", "E"), rec.method("incoming", "I"))
        assert combined("receiver", 1) == "I"
        assert [entry[0] for entry in rec.log] == ["existing", "incoming"]


class TestAround:
    def test_incoming_controls_existing(self):
        calls: list[str] = []

        def existing(receiver, x):
            calls.append(f"existing:{receiver}:{x}")
            return x * 2

        def incoming(receiver, proceed, x):
            calls.append("incoming:before")
            result = proceed(x + 1)
            calls.append("incoming:after")
            return result + 100

        combined = around(existing, incoming)
        assert combined("r", 1) == 104
        assert calls == ["incoming:before", "existing:r:2", "incoming:after"]

    def test_proceed_hides_receiver(self):
        seen: list = []

        def existing(receiver, **kwargs):
            return kwargs

        def incoming(receiver, proceed):
            seen.append(proceed)
            return proceed(flag=True)

        target = object()
        assert around(existing, incoming)(target) == {"flag": True}
        proceed = seen[0]
        assert not hasattr(proceed, "args")
        assert not hasattr(proceed, "func")

    def test_incoming_may_skip_existing(self, rec):
        def incoming(receiver, proceed):
            return "skipped"

        combined = around(rec.method("existing", 1), incoming)
        assert combined("receiver") == "skipped"
        assert rec.log == []


class TestApplyPolicy:
    def test_registry_covers_every_policy(self):
        assert set(POLICIES) == set(Policy)

    @pytest.mark.parametrize("tag", ["overwrite", Policy.OVERWRITE])
    def test_accepts_strings_and_enum(self, rec, tag):
        incoming = rec.method("incoming", 2)
        assert apply_policy(tag, rec.method("existing", 1), incoming) is incoming

    @pytest.mark.parametrize("tag", ["sideways", "AFTER", 3, None, ["after"]])
    def test_unsupported(self, rec, tag):
        with pytest.raises(UnsupportedPolicy) as info:
            apply_policy(
                tag,
                rec.method("existing", 1),
                rec.method("incoming", 2),
                name="m",
                behavior="B",
            )
        assert info.value.policy == tag
        assert info.value.name == "m"
        assert info.value.behavior == "B"
        assert isinstance(info.value, CompositionError)

    def test_to_policy(self):
        assert to_policy("around") is Policy.AROUND
