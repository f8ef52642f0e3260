import numpy as np
import pytest

from pulsetools import FilterSpec

# (sps, span, rolloff, frac_delay) covering tabulated and formula spans
DESIGN_GRID = [
    (2, 1, 0.3, 0.0),
    (2, 3, 0.3, 0.0),
    (2, 3, 0.5, 0.25),
    (3, 4, 0.2, -0.5),
    (4, 2, 0.5, 1.0),
    (4, 6, 0.35, 0.0),
    (2, 8, 0.25, -1.0),
    (3, 12, 0.25, 0.3),
]


def pytest_generate_tests(metafunc):
    if "design_params" in metafunc.fixturenames:
        metafunc.parametrize(
            "design_params",
            DESIGN_GRID,
            ids=[f"k{k}-m{m}-b{b}-dt{dt}" for k, m, b, dt in DESIGN_GRID],
        )


@pytest.fixture
def spec():
    """The reference design: sps=2, span=3, rolloff=0.3, no fractional delay."""
    return FilterSpec(sps=2, span=3, rolloff=0.3, frac_delay=0.0)


@pytest.fixture
def energy():
    """Returns a function computing the energy of a tap vector."""
    return lambda taps: float(np.sum(np.asarray(taps) ** 2))
