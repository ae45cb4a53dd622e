"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)


@pytest.fixture
def config():
    """Default engine constants."""
    from physarum.core import EngineConfig
    return EngineConfig()


@pytest.fixture
def small_network(rng):
    """Seven nodes at moderate connectivity."""
    from physarum.core import initialize
    return initialize(7, 0.5, rng=rng)


@pytest.fixture
def hotspot_network(small_network):
    """Seven nodes with the first one resource-rich."""
    from physarum.scenarios import apply_scenario
    return apply_scenario(small_network, "hotspot")
