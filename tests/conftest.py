"""
Pytest configuration and fixtures for spend simulator tests.
"""
import asyncio
import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from spendsim.api.main import app
from spendsim.api.dependencies import get_channels, get_insight_generator
from spendsim.config.channels import REFERENCE_ALLOCATION, REFERENCE_CHANNELS
from spendsim.model.response_curves import ChannelParameters
from spendsim.services.insights import InsightGenerator


@pytest.fixture
def reference_channels():
    """The four reference channels (fb, tv, search, print)."""
    return list(REFERENCE_CHANNELS)


@pytest.fixture
def reference_allocation():
    """Reference allocation totalling 100000."""
    return dict(REFERENCE_ALLOCATION)


@pytest.fixture
def fb_channel():
    return ChannelParameters(id="fb", shape=1.8, scale=40000, multiplier=2.5, label="Facebook Ads")


@pytest.fixture
def channels_file(tmp_path):
    """A channel file using the alpha/gamma/coeff keys."""
    path = tmp_path / "channels.json"
    path.write_text(json.dumps([
        {"id": "social", "name": "Social", "alpha": 1.5, "gamma": 20000, "coeff": 2.0, "color": "#000000"},
        {"id": "radio", "name": "Radio", "alpha": 0.8, "gamma": 80000, "coeff": 1.1},
    ]))
    return str(path)


class FakeModels:
    """Stands in for ``client.aio.models`` of the Gemini SDK."""

    def __init__(self, text=None, error=None, delay=0.0):
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate_content(self, model, contents):
        self.calls.append({"model": model, "contents": contents})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def make_fake_client(text=None, error=None, delay=0.0):
    models = FakeModels(text=text, error=error, delay=delay)
    return SimpleNamespace(aio=SimpleNamespace(models=models))


@pytest.fixture
def fake_client_factory():
    return make_fake_client


@pytest.fixture
def client(reference_channels):
    """Test client with the reference channels and no insight backend configured."""
    app.dependency_overrides[get_channels] = lambda: reference_channels
    app.dependency_overrides[get_insight_generator] = lambda: InsightGenerator(api_key="")

    yield TestClient(app)

    app.dependency_overrides.clear()
