# tests/helpers/__init__.py
"""Shared test utilities for the Summon test suite.

Usage:
    >>> from tests.helpers import expect_success, expect_failure, read_real_template
    >>>
    >>> value = expect_success(dry_run(task).result)
    >>> preview = dry_run_with(task, {ReadFile: read_real_template})
"""

from __future__ import annotations

from tests.helpers.mocks import BrokenPromptHandler, read_real_template, written_paths
from tests.helpers.result_utils import E, T, expect_failure, expect_success

__all__ = [
    # Result unwrapping
    "expect_success",
    "expect_failure",
    "T",
    "E",
    # Dry-run helpers
    "read_real_template",
    "written_paths",
    "BrokenPromptHandler",
]
