"""Ackee analytics data model.

Records are server-assigned handles for a single visit.  Events are
app-defined action types.  Attributes describe the client context sent
along with every new record.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

# ---------------------------------------------------------------------------
# Handles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Record:
    """A visit logged on the server, closable later via update."""

    id: str


@dataclass(frozen=True)
class Event:
    """An application-defined action type.

    ``key`` is the label the value is stored under, e.g.::

        PURCHASE = Event(id="purchase", key="Price")
    """

    id: str
    key: str


@dataclass(frozen=True)
class ActionInput:
    key: str
    value: float

    def to_input(self) -> Dict[str, Any]:
        return {"key": self.key, "value": self.value}


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------

# python attribute -> CreateRecordInput field
_WIRE_NAMES = (
    ("site_location", "siteLocation"),
    ("site_language", "siteLanguage"),
    ("screen_width", "screenWidth"),
    ("screen_height", "screenHeight"),
    ("device_name", "deviceName"),
    ("device_manufacturer", "deviceManufacturer"),
    ("os_name", "osName"),
    ("os_version", "osVersion"),
    ("browser_name", "browserName"),
    ("browser_version", "browserVersion"),
    ("browser_width", "browserWidth"),
    ("browser_height", "browserHeight"),
)


@dataclass
class Attributes:
    """Client context attached to a record when it is created.

    Nothing is validated here; the backend decides what it accepts.
    ``browser_width``/``browser_height`` are not constructor arguments:
    they mirror the screen size at construction, the way a full-screen
    app reports it.
    """

    # --- page ---
    site_location: Optional[str] = None
    site_language: Optional[str] = None

    # --- screen ---
    screen_width: Optional[float] = None
    screen_height: Optional[float] = None

    # --- device ---
    device_name: Optional[str] = None
    device_manufacturer: str = "Apple"
    os_name: str = "iOS"
    os_version: Optional[str] = None

    # --- browser ---
    browser_name: str = "Structured iOS"
    browser_version: Optional[str] = None
    browser_width: Optional[float] = field(init=False, default=None)
    browser_height: Optional[float] = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.browser_width = self.screen_width
        self.browser_height = self.screen_height

    def with_location(self, path: str) -> "Attributes":
        """Return an independent copy pointing at ``path``."""
        # browser size stays as constructed, even if the screen size changed since
        copied = copy.copy(self)
        copied.site_location = path
        return copied

    def to_input(self) -> Dict[str, Any]:
        """Serialize to a CreateRecordInput object (unset fields as null)."""
        return {wire: getattr(self, attr) for attr, wire in _WIRE_NAMES}

    @classmethod
    def from_input(cls, data: Dict[str, Any]) -> "Attributes":
        settable = {f.name for f in fields(cls) if f.init}
        return cls(
            **{attr: data[wire] for attr, wire in _WIRE_NAMES if wire in data and attr in settable}
        )
