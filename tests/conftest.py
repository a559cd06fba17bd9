"""
Pytest configuration for bftape tests.

Provides:
- Hypothesis profiles for deterministic fuzzing (HYPOTHESIS_PROFILE env var)
- Shared machine/output fixtures
"""

import os

import pytest
from hypothesis import settings

from bftape import Machine

# =============================================================================
# Hypothesis Configuration
# =============================================================================
# - print_blob=True makes failures easy to reproduce
# - "ci" derandomizes so CI runs are repeatable

settings.register_profile(
    "default",
    print_blob=True,
    derandomize=False,
)

settings.register_profile(
    "ci",
    print_blob=True,
    derandomize=True,
)

settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def output():
    """List collecting every character passed to the output hook."""
    return []


@pytest.fixture
def machine(output):
    """Empty machine wired to the `output` list, tracing off."""
    return Machine(output_hook=output.append, trace=False)
