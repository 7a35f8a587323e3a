"""WheelService による抽選フローのテスト。"""

from __future__ import annotations

from pathlib import Path
import random
import sys

import pytest

SRC_ROOT = Path(__file__).resolve().parents[3] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from wheelpick.domain.templates import (  # noqa: E402
    OptionType,
    TemplateStore,
    ValidationError,
)
from wheelpick.domain.wheel import SpinOutcome, WheelService, eligible_options  # noqa: E402
from wheelpick.infrastructure.settings import InMemoryKeyValueStore  # noqa: E402


@pytest.fixture()
def store() -> TemplateStore:
    return TemplateStore(InMemoryKeyValueStore())


@pytest.fixture()
def wheel(store: TemplateStore) -> WheelService:
    return WheelService(store, rng=random.Random(7))


def test_hide_mode_exhausts_and_reset_restores(
    store: TemplateStore, wheel: WheelService
) -> None:
    template = store.create_template("X")
    a = store.add_option(template.id, "A")
    b = store.add_option(template.id, "B")
    assert a is not None and b is not None
    store.toggle_option_enabled(template.id, b.id, False)
    store.set_hide_picked_enabled(True)

    outcome = wheel.spin()

    assert outcome is not None
    assert outcome.option.id == a.id
    assert not outcome.offers_switch
    assert wheel.visible_options() == []
    assert wheel.spin() is None

    wheel.reset_hidden()
    assert [o.id for o in wheel.visible_options()] == [a.id]


def test_manual_hide_then_clear(store: TemplateStore) -> None:
    template = store.create_template("X")
    a = store.add_option(template.id, "A")
    b = store.add_option(template.id, "B")
    assert a is not None and b is not None
    store.toggle_option_enabled(template.id, b.id, False)
    store.set_hide_picked_enabled(True)

    store.set_hidden_option(template.id, a.id, True)
    current = store.get_current_template()
    assert eligible_options(current, store.get_hide_picked_enabled()) == []

    store.clear_hidden_options(template.id)
    current = store.get_current_template()
    assert [o.id for o in eligible_options(current, True)] == [a.id]


def test_spin_without_hide_mode_keeps_options(
    store: TemplateStore, wheel: WheelService
) -> None:
    template = store.create_template("X")
    store.add_option(template.id, "A")

    assert wheel.spin() is not None
    assert store.get_template(template.id).hidden_option_ids == []  # type: ignore[union-attr]


def test_record_pick_respects_flag(store: TemplateStore, wheel: WheelService) -> None:
    template = store.create_template("X")
    a = store.add_option(template.id, "A")
    assert a is not None

    wheel.record_pick(template.id, a.id)
    assert store.get_template(template.id).hidden_option_ids == []  # type: ignore[union-attr]

    store.set_hide_picked_enabled(True)
    wheel.record_pick(template.id, a.id)
    assert store.get_template(template.id).hidden_option_ids == [a.id]  # type: ignore[union-attr]


def test_sub_template_pick_offers_switch(
    store: TemplateStore, wheel: WheelService
) -> None:
    movies = store.create_template("Movies")
    party = store.create_template("Party")
    store.add_option(party.id, "", OptionType.SUBTEMPLATE, movies.id)

    outcome = wheel.spin()

    assert outcome is not None
    assert outcome.template_id == party.id
    assert outcome.offers_switch
    assert outcome.sub_template is not None
    assert outcome.sub_template.name == "Movies"

    switched = wheel.switch_to(outcome)
    assert switched.id == movies.id
    assert store.get_current_template_id() == movies.id


def test_self_reference_switch_does_not_loop(
    store: TemplateStore, wheel: WheelService
) -> None:
    loop = store.create_template("Loop")
    store.add_option(loop.id, "", OptionType.SUBTEMPLATE, loop.id)

    for _ in range(3):
        outcome = wheel.spin()
        assert outcome is not None
        assert wheel.switch_to(outcome).id == loop.id


def test_switch_to_deleted_sub_template_raises(
    store: TemplateStore, wheel: WheelService
) -> None:
    movies = store.create_template("Movies")
    party = store.create_template("Party")
    link = store.add_option(party.id, "", OptionType.SUBTEMPLATE, movies.id)
    assert link is not None
    outcome = SpinOutcome(template_id=party.id, option=link)

    store.delete_template(movies.id)

    with pytest.raises(ValidationError) as excinfo:
        wheel.switch_to(outcome)
    assert excinfo.value.message_key == "Sub-template not found"
