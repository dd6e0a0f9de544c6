"""
Scenario bookkeeping as pure functions over tuples.

The registry never stores anything: callers pass the current scenarios in and
get the new tuple back, then hand it to whatever persists it.

Invariant: after delete_scenario, the product still has at least one
scenario (a fresh all-zero default is added when the last one goes).
"""
from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Sequence, Tuple

import deal

from plancast.infra.logging_std import get_logger, log_kv
from plancast.infra.time_utc import utc_stamp, now_utc
from plancast.scenarios.model import Scenario, ScenarioModifiers, ScenarioVariant

logger = get_logger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


def _new_id() -> str:
    return str(uuid.uuid4())


def scenarios_for_product(scenarios: Sequence[Scenario], product_id: str) -> Tuple[Scenario, ...]:
    return tuple(s for s in scenarios if s.product_id == product_id)


def default_scenario(
    product_id: str,
    product_name: str = "",
    *,
    clock: Clock = now_utc,
    new_id: IdFactory = _new_id,
) -> Scenario:
    label = product_name or product_id
    stamp = utc_stamp(clock())
    return Scenario(
        scenario_id=new_id(),
        product_id=product_id,
        name=f"{label} - New Scenario",
        description=f"Scenario for {label}",
        modifiers=ScenarioModifiers(),
        variant=ScenarioVariant.CUSTOM,
        created_at=stamp,
        updated_at=stamp,
    )


def create_scenario(
    scenarios: Sequence[Scenario],
    product_id: str,
    name: str,
    *,
    description: str = "",
    modifiers: Optional[ScenarioModifiers] = None,
    variant: ScenarioVariant = ScenarioVariant.CUSTOM,
    clock: Clock = now_utc,
    new_id: IdFactory = _new_id,
) -> Tuple[Tuple[Scenario, ...], Scenario]:
    """Returns (all scenarios including the new one, the new scenario)."""
    stamp = utc_stamp(clock())
    created = Scenario(
        scenario_id=new_id(),
        product_id=product_id,
        name=name,
        description=description,
        modifiers=modifiers or ScenarioModifiers(),
        variant=variant,
        created_at=stamp,
        updated_at=stamp,
    )
    return tuple(scenarios) + (created,), created


def _find(scenarios: Sequence[Scenario], scenario_id: str) -> Scenario:
    for s in scenarios:
        if s.scenario_id == scenario_id:
            return s
    raise KeyError(scenario_id)


@deal.raises(KeyError, deal.RaisesContractError)
def duplicate_scenario(
    scenarios: Sequence[Scenario],
    scenario_id: str,
    *,
    clock: Clock = now_utc,
    new_id: IdFactory = _new_id,
) -> Tuple[Tuple[Scenario, ...], Scenario]:
    """Copy with a fresh id, a fresh timestamp pair and ' (Copy)' appended to the name."""
    source = _find(scenarios, scenario_id)
    stamp = utc_stamp(clock())
    copy = replace(
        source,
        scenario_id=new_id(),
        name=f"{source.name} (Copy)",
        created_at=stamp,
        updated_at=stamp,
    )
    return tuple(scenarios) + (copy,), copy


@deal.raises(KeyError, deal.RaisesContractError)
def update_scenario(
    scenarios: Sequence[Scenario],
    scenario_id: str,
    *,
    name: Optional[str] = None,
    description: Optional[str] = None,
    modifiers: Optional[ScenarioModifiers] = None,
    variant: Optional[ScenarioVariant] = None,
    clock: Clock = now_utc,
) -> Tuple[Tuple[Scenario, ...], Scenario]:
    current = _find(scenarios, scenario_id)
    updated = replace(
        current,
        name=current.name if name is None else name,
        description=current.description if description is None else description,
        modifiers=current.modifiers if modifiers is None else modifiers,
        variant=current.variant if variant is None else variant,
        updated_at=utc_stamp(clock()),
    )
    out = tuple(updated if s.scenario_id == scenario_id else s for s in scenarios)
    return out, updated


@deal.post(lambda result: isinstance(result, tuple), message="must return tuple")
@deal.raises(KeyError, deal.RaisesContractError)
def delete_scenario(
    scenarios: Sequence[Scenario],
    scenario_id: str,
    *,
    product_name: str = "",
    clock: Clock = now_utc,
    new_id: IdFactory = _new_id,
) -> Tuple[Scenario, ...]:
    """
    Remove one scenario. When it was the product's last one, a default
    all-zero scenario is appended so the product stays addressable.
    """
    removed = _find(scenarios, scenario_id)
    remaining = tuple(s for s in scenarios if s.scenario_id != scenario_id)
    if scenarios_for_product(remaining, removed.product_id):
        return remaining

    replacement = default_scenario(removed.product_id, product_name, clock=clock, new_id=new_id)
    log_kv(
        logger,
        "last scenario deleted, default created",
        product_id=removed.product_id,
        scenario_id=replacement.scenario_id,
    )
    return remaining + (replacement,)
