"""Pytest configuration - add src to path and provide a fake VWO SDK."""
import copy
import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / "src"))


SAMPLE_SETTINGS = {
    "accountId": 123456,
    "sdkKey": "key1",
    "version": 1,
    "campaigns": [
        {
            "id": 10,
            "key": "homepage_cta",
            "name": "Homepage CTA",
            "status": "RUNNING",
            "type": "VISUAL_AB",
            "percentTraffic": 100,
            "goals": [{"id": 1, "identifier": "purchase", "type": "CUSTOM_GOAL"}],
            "variations": [
                {"id": 1, "name": "Control", "weight": 50},
                {"id": 2, "name": "Variation-1", "weight": 50},
            ],
        },
        {
            "id": 11,
            "key": "checkout_flow",
            "name": "Checkout flow",
            "status": "PAUSED",
            "type": "VISUAL_AB",
            "percentTraffic": 50,
            "goals": [{"id": 2, "identifier": "purchase", "type": "REVENUE_TRACKING"}],
            "variations": [
                {"id": 1, "name": "Control", "weight": 34},
                {"id": 2, "name": "One page", "weight": 33},
                {"id": 3, "name": "Two pages", "weight": 33},
            ],
        },
    ],
}


class FakeVwoClient:
    """Stands in for a VWO client instance."""

    def __init__(self, settings_file, assignments, broken_campaigns):
        self.settings = json.loads(settings_file)
        self.campaign_keys = {c["key"] for c in self.settings["campaigns"]}
        self.assignments = assignments
        self.broken_campaigns = broken_campaigns
        self.variation_calls = []
        self.activated = []
        self.tracked = []
        self.fail_track = False

    def get_variation_name(self, campaign_key, user_id, **kwargs):
        self.variation_calls.append((campaign_key, user_id, kwargs))
        if campaign_key in self.broken_campaigns:
            raise RuntimeError(f"campaign {campaign_key} is broken")
        return self.assignments.get((campaign_key, user_id))

    def activate(self, campaign_key, user_id, **kwargs):
        if campaign_key not in self.campaign_keys:
            raise KeyError(campaign_key)
        self.activated.append((campaign_key, user_id, kwargs))
        return self.assignments.get((campaign_key, user_id))

    def track(self, campaign_specifier, user_id, goal_identifier, **kwargs):
        if self.fail_track:
            raise RuntimeError("track failed")
        self.tracked.append((campaign_specifier, user_id, goal_identifier, kwargs))
        return True


class FakeVwoSdk:
    """Stands in for the ``vwo`` module: settings fetch and client launch."""

    def __init__(self, settings):
        self.settings = settings
        self.fetch_calls = []
        self.launched = []
        self.assignments = {}
        self.broken_campaigns = set()
        self.fail_fetch = False
        self.fail_launch = False

    def get_settings_file(self, account_id, sdk_key):
        self.fetch_calls.append((account_id, sdk_key))
        if self.fail_fetch:
            raise ConnectionError("network down")
        return json.dumps(self.settings)

    def launch(self, settings_file, **kwargs):
        if self.fail_launch:
            raise ValueError("settings file rejected")
        client = FakeVwoClient(settings_file, self.assignments, self.broken_campaigns)
        self.launched.append(client)
        return client


@pytest.fixture
def settings():
    """Fresh copy of the sample VWO settings file."""
    return copy.deepcopy(SAMPLE_SETTINGS)


@pytest.fixture
def fake_sdk(settings):
    return FakeVwoSdk(settings)


@pytest.fixture
def provider_config():
    return {"accountId": "acc1", "sdkKey": "key1", "pollTime": 5000}
