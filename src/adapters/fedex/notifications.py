"""Reply notification classification.

Every gateway reply carries one or more `Notifications` blocks. Only the
first one decides the outcome of the call.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass

from adapters.fedex.xml_tree import child_text

SUCCESS_SEVERITIES = frozenset({"SUCCESS", "WARNING", "NOTE"})


@dataclass(frozen=True)
class Notification:
    severity: str = ""
    code: str = ""
    message: str = ""

    @classmethod
    def from_reply(cls, reply_root: ET.Element | None) -> "Notification":
        """First notification of a reply; all fields empty when there is none."""

        if reply_root is None:
            return cls()
        node = reply_root.find("Notifications")
        if node is None:
            return cls()
        return cls(
            severity=child_text(node, "Severity"),
            code=child_text(node, "Code"),
            message=child_text(node, "Message"),
        )

    @property
    def is_success(self) -> bool:
        return self.severity in SUCCESS_SEVERITIES

    def compose_message(self) -> str:
        return f"{self.severity} - {self.code}: {self.message}"
