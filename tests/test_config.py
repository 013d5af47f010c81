"""Settings defaults."""

from src.config import Settings
from src.domain.ride_selection import CURRENT_LOCATION_LABEL


def test_current_location_label_defaults_to_domain_label():
    assert Settings().current_location_label == CURRENT_LOCATION_LABEL


def test_current_location_label_can_be_overridden(monkeypatch):
    monkeypatch.setenv("CURRENT_LOCATION_LABEL", "My Location")
    assert Settings().current_location_label == "My Location"
