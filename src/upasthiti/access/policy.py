from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from ..core.enums import Role


@dataclass(frozen=True)
class NavItem:
    view_id: str
    label: str

    def to_dict(self) -> dict:
        return {"viewId": self.view_id, "label": self.label}


DASHBOARD = "dashboard"
SCAN_QR = "scan-qr"
ATTENDANCE = "attendance"
ANALYTICS = "analytics"
GENERATE_QR = "generate-qr"
WIFI_TRACKING = "wifi-tracking"
FRAUD_DETECTION = "fraud-detection"
SETTINGS = "settings"

# Views that only make sense with an owned subject list.
SUBJECT_SCOPED_VIEWS = frozenset({ATTENDANCE, GENERATE_QR})

_STUDENT_NAV: Tuple[NavItem, ...] = (
    NavItem(DASHBOARD, "My Dashboard"),
    NavItem(SCAN_QR, "Scan QR"),
    NavItem(ANALYTICS, "My Analytics"),
)

_FACULTY_NAV: Tuple[NavItem, ...] = (
    NavItem(DASHBOARD, "Dashboard"),
    NavItem(ATTENDANCE, "Attendance"),
    NavItem(ANALYTICS, "Analytics"),
    NavItem(GENERATE_QR, "Generate QR"),
    NavItem(WIFI_TRACKING, "Wi-Fi Tracking"),
    NavItem(FRAUD_DETECTION, "Fraud Detection"),
    NavItem(SETTINGS, "Settings"),
)

_ADMIN_NAV: Tuple[NavItem, ...] = tuple(i for i in _FACULTY_NAV if i.view_id not in SUBJECT_SCOPED_VIEWS)

_NAVIGATION: Dict[Role, Tuple[NavItem, ...]] = {
    Role.STUDENT: _STUDENT_NAV,
    Role.FACULTY: _FACULTY_NAV,
    Role.ADMIN: _ADMIN_NAV,
}


def _as_role(role: Union[Role, str]) -> Role | None:
    try:
        return Role(role)
    except ValueError:
        return None


class AccessPolicy:
    """Static role -> permitted-view mapping.

    A pure function of its arguments: no state, no clock. Unknown roles
    and unknown views are denied.
    """

    def visible_navigation(self, role: Union[Role, str]) -> List[NavItem]:
        r = _as_role(role)
        if r is None:
            return []
        return list(_NAVIGATION[r])

    def is_view_allowed(self, role: Union[Role, str], view_id: str) -> bool:
        return any(item.view_id == view_id for item in self.visible_navigation(role))

    def shows_subject_selector(self, role: Union[Role, str]) -> bool:
        return _as_role(role) in (Role.STUDENT, Role.FACULTY)
