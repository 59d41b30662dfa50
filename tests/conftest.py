"""Pytest configuration for the textcombinators test suite.

Hypothesis profiles:
- dev: local development with 200 examples
- ci: fast, deterministic runs (50 examples)

Override with HYPOTHESIS_PROFILE=ci pytest
"""

import os

import pytest
from hypothesis import Phase, settings

import textcombinators.parser

settings.register_profile(
    "dev",
    max_examples=200,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)


def _detect_profile() -> str:
    if explicit := os.environ.get("HYPOTHESIS_PROFILE"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


@pytest.fixture
def debug_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    """Build combinators with debug logging enabled for the duration of a test."""
    monkeypatch.setattr(textcombinators.parser, "debug", True)
