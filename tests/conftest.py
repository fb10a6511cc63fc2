"""Shared fixtures."""

import pytest

from formrule.rules.registry import RuleRegistry


@pytest.fixture(autouse=True)
def fresh_singleton(monkeypatch):
    """Each test starts without a process-wide registry or config file."""
    monkeypatch.delenv("FORMRULE_CONFIG", raising=False)
    RuleRegistry.reset_singleton()
    yield
    RuleRegistry.reset_singleton()


@pytest.fixture
def registry():
    return RuleRegistry()
