"""
Scenarios: named policies that rewrite node gradients (and sometimes
activity or topology).

- apply_scenario: balanced, hotspot, migration, failure, growth
- advance_migration: per-tick update of the travelling resource peak
"""

from physarum.scenarios.presets import Scenario, SCENARIOS, apply_scenario
from physarum.scenarios.migration import advance_migration, migration_profile, water_fill

__all__ = [
    "Scenario",
    "SCENARIOS",
    "apply_scenario",
    "advance_migration",
    "migration_profile",
    "water_fill",
]
