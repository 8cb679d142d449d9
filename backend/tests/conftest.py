"""
Shared pytest fixtures for the RivalScout test suite.
"""
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from rivalscout.modules.models import SiteProfile


class FakeClock:
    """Injectable monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeProvider:
    """Ranked-result provider double; ``results`` maps query -> list of URLs."""

    def __init__(self, name="fake", results=None, configured=True, error=None):
        self.name = name
        self.configured = configured
        self._results = results or {}

        async def ranked_results(query, locale, depth=10):
            if error is not None:
                raise error
            urls = self._results(query) if callable(self._results) else self._results.get(query, [])
            return [{"url": u, "position": i + 1} for i, u in enumerate(urls)]

        self.ranked_results = AsyncMock(side_effect=ranked_results)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def saas_profile():
    return SiteProfile(
        site_type="SaaS",
        seeds=["Invoice automation software", "Expense tracking for teams"],
        title="Acme | Invoice Automation Software",
        description="Automate invoices and track expenses.",
        h1s=["Get paid faster"],
        slug_phrases=["invoice templates"],
    )
