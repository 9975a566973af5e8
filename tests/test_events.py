"""Tests for the Ackee data model."""

import pytest

from ackee_analytics.events import ActionInput, Attributes, Event, Record

WIRE_FIELDS = {
    "siteLocation",
    "siteLanguage",
    "screenWidth",
    "screenHeight",
    "deviceName",
    "deviceManufacturer",
    "osName",
    "osVersion",
    "browserName",
    "browserVersion",
    "browserWidth",
    "browserHeight",
}


class TestAttributes:
    def test_defaults(self):
        attrs = Attributes()
        assert attrs.device_manufacturer == "Apple"
        assert attrs.os_name == "iOS"
        assert attrs.browser_name == "Structured iOS"
        assert attrs.site_location is None
        assert attrs.screen_width is None

    def test_mirrors_screen_into_browser(self):
        attrs = Attributes(screen_width=390, screen_height=844)

        assert attrs.browser_width == 390
        assert attrs.browser_height == 844

    def test_overrides(self):
        attrs = Attributes(
            os_version="17.4",
            browser_version="2.1",
            site_language="de",
            device_name="iPhone",
        )

        assert attrs.os_version == "17.4"
        assert attrs.browser_version == "2.1"
        assert attrs.site_language == "de"
        assert attrs.device_name == "iPhone"
        # baseline defaults survive
        assert attrs.os_name == "iOS"

    def test_browser_size_fixed_at_construction(self):
        attrs = Attributes(screen_width=100, screen_height=200)
        attrs.screen_width = 300

        assert attrs.browser_width == 100

    def test_browser_size_not_settable_at_construction(self):
        with pytest.raises(TypeError):
            Attributes(screen_width=100, browser_width=50)  # type: ignore[call-arg]

    def test_copy_keeps_constructed_browser_size(self):
        attrs = Attributes(screen_width=100, screen_height=200)
        attrs.screen_width = 300

        copy = attrs.with_location("/p")

        assert copy.screen_width == 300
        assert copy.browser_width == 100
        assert copy.browser_height == 200

    def test_to_input_has_exactly_wire_fields(self):
        row = Attributes(screen_width=1.5, screen_height=2.5).to_input()

        assert set(row) == WIRE_FIELDS
        assert row["screenWidth"] == 1.5
        assert row["browserWidth"] == 1.5
        assert row["browserHeight"] == 2.5
        assert row["deviceManufacturer"] == "Apple"
        assert row["siteLocation"] is None

    def test_with_location_returns_copy(self):
        base = Attributes(site_language="en")
        copy = base.with_location("/home")

        assert copy.site_location == "/home"
        assert copy.site_language == "en"
        assert base.site_location is None
        assert copy is not base

    def test_copies_are_independent(self):
        base = Attributes()
        a = base.with_location("/a")
        b = base.with_location("/b")
        a.site_language = "fr"

        assert b.site_language is None
        assert base.site_language is None

    def test_from_input_round_trip(self):
        attrs = Attributes(os_version="1", screen_width=10).with_location("/x")
        assert Attributes.from_input(attrs.to_input()) == attrs

    def test_no_validation(self):
        attrs = Attributes(site_location="", os_name="???", screen_width=-1)
        assert attrs.to_input()["screenWidth"] == -1


class TestHandles:
    def test_record_is_immutable(self):
        record = Record(id="abc")
        with pytest.raises(AttributeError):
            record.id = "other"  # type: ignore[misc]

    def test_event_equality(self):
        assert Event(id="purchase", key="Price") == Event(id="purchase", key="Price")

    def test_action_input(self):
        assert ActionInput(key="Price", value=5.0).to_input() == {"key": "Price", "value": 5.0}
