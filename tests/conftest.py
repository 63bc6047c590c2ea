"""Shared pytest setup: Hypothesis profiles and the fuzz marker.

Profiles (max_examples):
    dev      500, the default for local runs
    ci       50, derandomized; selected automatically when CI=true
    verbose  100, prints every example

HYPOTHESIS_PROFILE=<name> takes precedence over CI detection, e.g.
``HYPOTHESIS_PROFILE=verbose pytest tests/test_lazy.py``.

Tests marked ``fuzz`` are skipped unless the run selects them with
``pytest -m fuzz``.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

_PHASES = [Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink]
_PROFILES = ("dev", "ci", "verbose")

settings.register_profile("dev", max_examples=500, phases=_PHASES)
settings.register_profile(
    "ci", max_examples=50, phases=_PHASES, derandomize=True, print_blob=True
)
settings.register_profile(
    "verbose", max_examples=100, phases=_PHASES, verbosity=Verbosity.verbose
)


def _profile_name() -> str:
    requested = os.environ.get("HYPOTHESIS_PROFILE", "")
    if requested in _PROFILES:
        return requested
    return "ci" if os.environ.get("CI") == "true" else "dev"


settings.load_profile(_profile_name())


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip ``fuzz`` tests unless the -m expression mentions them."""
    if "fuzz" in str(config.getoption("-m", default="")):
        return
    skip = pytest.mark.skip(reason="fuzz test; select with: pytest -m fuzz")
    for item in items:
        if item.get_closest_marker("fuzz") is not None:
            item.add_marker(skip)
