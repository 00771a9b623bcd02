"""Test configuration for pytest.

Ensure the repository root is on sys.path so tests can import the `memsim`
package (and `run.py`) without needing PYTHONPATH set externally.
"""
import os
import sys

import pytest

# Compute project root: two directories above this file (memsim/tests -> memsim -> project root)
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from memsim.core.config import CacheConfig  # noqa: E402


@pytest.fixture
def config():
    return CacheConfig()
