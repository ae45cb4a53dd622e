"""
Scenario presets: named gradient/topology policies.

- balanced:  every node at the neutral level (no drive, network relaxes)
- hotspot:   one node resource-rich, the rest poor (star of thick tubes)
- migration: travelling resource peak, continued by advance_migration()
- failure:   one random active node goes offline
- growth:    balanced gradients on a stripped-down network that regrows

Deterministic presets are idempotent: applying one twice to the same
snapshot gives identical gradients. Only "failure" draws randomness, from
an explicit numpy Generator.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Literal, get_args

import numpy as np

from physarum.core.gradient import ResourceGradient
from physarum.core.network import (
    DEFAULT_CONFIG,
    ConfigurationError,
    EngineConfig,
    Plasmodium,
)
from physarum.scenarios.migration import migration_profile

logger = logging.getLogger(__name__)

Scenario = Literal["balanced", "hotspot", "migration", "failure", "growth"]
SCENARIOS: tuple[str, ...] = get_args(Scenario)

HOTSPOT_RICH = ResourceGradient(compute=0.9, storage=0.85, bandwidth=0.9)
HOTSPOT_POOR_LEVEL = 0.15


def _with_uniform_gradients(plasmodium: Plasmodium, value: float) -> Plasmodium:
    gradient = ResourceGradient.uniform(value, freshness=plasmodium.time)
    nodes = {
        node_id: replace(node, gradient=gradient)
        for node_id, node in plasmodium.nodes.items()
    }
    return replace(plasmodium, nodes=nodes)


def _balanced(plasmodium: Plasmodium, config: EngineConfig) -> Plasmodium:
    return _with_uniform_gradients(plasmodium, config.neutral_gradient)


def _hotspot(plasmodium: Plasmodium, config: EngineConfig) -> Plasmodium:
    if not plasmodium.nodes:
        return plasmodium
    plas = _with_uniform_gradients(plasmodium, HOTSPOT_POOR_LEVEL)
    hot_id = next(iter(plas.nodes))
    nodes = dict(plas.nodes)
    nodes[hot_id] = replace(
        nodes[hot_id], gradient=replace(HOTSPOT_RICH, freshness=plasmodium.time)
    )
    return replace(plas, nodes=nodes)


def _migration(plasmodium: Plasmodium, config: EngineConfig) -> Plasmodium:
    nodes = migration_profile(plasmodium, plasmodium.migration_phase, config)
    return replace(plasmodium, nodes=nodes)


def _failure(
    plasmodium: Plasmodium,
    config: EngineConfig,
    rng: np.random.Generator,
) -> Plasmodium:
    active = plasmodium.active_nodes()
    if not active:
        logger.info("failure scenario: no active node left to deactivate")
        return plasmodium

    victim = active[int(rng.integers(len(active)))]
    nodes = dict(plasmodium.nodes)
    nodes[victim.id] = replace(
        victim,
        is_active=False,
        gradient=ResourceGradient.uniform(0.0, freshness=plasmodium.time),
    )
    logger.info("failure scenario: deactivated %s (%s)", victim.id, victim.label)
    return replace(plasmodium, nodes=nodes)


def _growth(plasmodium: Plasmodium, config: EngineConfig) -> Plasmodium:
    plas = _balanced(plasmodium, config)
    if not plas.nodes:
        return plas
    # Keep only the first node's tubes; the step loop regrows the rest
    origin = next(iter(plas.nodes))
    tubes = {t.id: t for t in plas.incident_tubes(origin)}
    return replace(plas, tubes=tubes)


def apply_scenario(
    plasmodium: Plasmodium,
    scenario: Scenario,
    config: EngineConfig | None = None,
    rng: np.random.Generator | None = None,
) -> Plasmodium:
    """
    Apply a named scenario to a snapshot.

    Args:
        plasmodium: Current snapshot (left untouched)
        scenario: One of SCENARIOS
        config: Engine constants (defaults if None)
        rng: Random source for "failure" (fresh default_rng if None)

    Returns:
        New snapshot

    Raises:
        ConfigurationError: if the scenario name is unknown or config is invalid
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    cfg.validate()

    if scenario == "balanced":
        result = _balanced(plasmodium, cfg)
    elif scenario == "hotspot":
        result = _hotspot(plasmodium, cfg)
    elif scenario == "migration":
        result = _migration(plasmodium, cfg)
    elif scenario == "failure":
        result = _failure(plasmodium, cfg, rng if rng is not None else np.random.default_rng())
    elif scenario == "growth":
        result = _growth(plasmodium, cfg)
    else:
        raise ConfigurationError(
            f"Unknown scenario {scenario!r}; expected one of {', '.join(SCENARIOS)}"
        )

    logger.debug("applied scenario %s at t=%.3f", scenario, plasmodium.time)
    return result
