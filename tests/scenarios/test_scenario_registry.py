from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from itertools import count

import pytest

from plancast.errors import InvalidInputError
from plancast.scenarios.model import Scenario, ScenarioModifiers, ScenarioVariant, parse_modifiers
from plancast.scenarios.registry import (
    create_scenario,
    default_scenario,
    delete_scenario,
    duplicate_scenario,
    scenarios_for_product,
    update_scenario,
)

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
T1 = datetime(2026, 3, 2, 8, 30, 0, tzinfo=timezone.utc)


def _ids():
    n = count(1)
    return lambda: f"id-{next(n)}"


def test_create_and_filter_by_product() -> None:
    new_id = _ids()
    scenarios, a = create_scenario((), "p1", "Base", clock=lambda: T0, new_id=new_id)
    scenarios, b = create_scenario(scenarios, "p2", "Other", clock=lambda: T0, new_id=new_id)

    assert a.scenario_id == "id-1"
    assert a.created_at == a.updated_at == "2026-03-01T12:00:00.000Z"
    assert a.modifiers.is_neutral
    assert scenarios_for_product(scenarios, "p1") == (a,)
    assert len(scenarios) == 2


def test_duplicate_appends_copy_suffix_and_new_identity() -> None:
    new_id = _ids()
    scenarios, original = create_scenario(
        (), "p1", "Summer", modifiers=ScenarioModifiers(ticket_revenue=5), clock=lambda: T0, new_id=new_id
    )
    scenarios, copy = duplicate_scenario(scenarios, original.scenario_id, clock=lambda: T1, new_id=new_id)

    assert copy.name == "Summer (Copy)"
    assert copy.scenario_id != original.scenario_id
    assert copy.modifiers == original.modifiers
    assert copy.created_at != original.created_at
    assert len(scenarios) == 2


def test_update_refreshes_timestamp_only_for_target() -> None:
    new_id = _ids()
    scenarios, a = create_scenario((), "p1", "A", clock=lambda: T0, new_id=new_id)
    scenarios, b = create_scenario(scenarios, "p1", "B", clock=lambda: T0, new_id=new_id)

    scenarios, updated = update_scenario(
        scenarios, a.scenario_id, name="A2", variant=ScenarioVariant.OPTIMISTIC, clock=lambda: T1
    )
    assert updated.name == "A2"
    assert updated.variant is ScenarioVariant.OPTIMISTIC
    assert updated.created_at == a.created_at
    assert updated.updated_at != a.updated_at
    assert scenarios[1] == b


def test_unknown_id_raises_key_error() -> None:
    with pytest.raises(KeyError):
        update_scenario((), "missing", name="x")


def test_deleting_last_scenario_creates_default() -> None:
    new_id = _ids()
    scenarios, only = create_scenario((), "p1", "Only", clock=lambda: T0, new_id=new_id)
    remaining = delete_scenario(
        scenarios, only.scenario_id, product_name="Pop-up", clock=lambda: T1, new_id=new_id
    )

    assert len(remaining) == 1
    replacement = remaining[0]
    assert replacement.product_id == "p1"
    assert replacement.name == "Pop-up - New Scenario"
    assert replacement.modifiers.is_neutral


def test_deleting_one_of_many_keeps_the_rest() -> None:
    new_id = _ids()
    scenarios, a = create_scenario((), "p1", "A", clock=lambda: T0, new_id=new_id)
    scenarios, b = create_scenario(scenarios, "p1", "B", clock=lambda: T0, new_id=new_id)
    assert delete_scenario(scenarios, a.scenario_id) == (b,)


def test_default_scenario_falls_back_to_product_id() -> None:
    s = default_scenario("p9", clock=lambda: T0, new_id=lambda: "x")
    assert s.name == "p9 - New Scenario"
    assert s.created_at.endswith("Z")


def test_parse_modifiers_nested_and_flat() -> None:
    nested = parse_modifiers(
        {"revenue": {"ticketRevenue": 10}, "costs": {"staffingCost": -5}, "attendance": {"footTraffic": 3}}
    )
    assert nested.ticket_revenue == Decimal("10")
    assert nested.staffing_cost == Decimal("-5")
    assert nested.attendance == Decimal("3")

    flat = parse_modifiers({"digital_revenue": "7.5"})
    assert flat.digital_revenue == Decimal("7.5")
    assert parse_modifiers(None).is_neutral


def test_parse_modifiers_rejects_unknown_keys() -> None:
    with pytest.raises(InvalidInputError):
        parse_modifiers({"vibes": 10})


def test_scenario_rejects_unknown_variant() -> None:
    with pytest.raises(InvalidInputError):
        Scenario(scenario_id="s", product_id="p", name="n", created_at="", updated_at="", variant="wild")


def test_scenario_to_dict_shape() -> None:
    s = default_scenario("p1", "Fair", clock=lambda: T0, new_id=lambda: "s-1")
    d = s.to_dict()
    assert d["id"] == "s-1"
    assert d["productId"] == "p1"
    assert d["modifiers"]["revenue"]["ticketRevenue"] == "0"
    assert d["variant"] == "custom"
