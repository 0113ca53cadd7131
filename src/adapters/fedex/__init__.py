"""FedEx XML gateway protocol.

Why a package:
- Groups the wire-level pieces (code tables, builders, parsers).
- Everything here is pure: no I/O, no credentials state.
"""

from adapters.fedex.notifications import Notification
from adapters.fedex.request_builders import (
    build_rate_request,
    build_registration_request,
    build_subscription_request,
    build_tracking_request,
    build_version_capture_request,
)
from adapters.fedex.response_parsers import (
    parse_rate_reply,
    parse_registration_reply,
    parse_subscription_reply,
    parse_tracking_reply,
    parse_version_capture_reply,
)

__all__ = [
	"Notification",
	"build_rate_request",
	"build_registration_request",
	"build_subscription_request",
	"build_tracking_request",
	"build_version_capture_request",
	"parse_rate_reply",
	"parse_registration_reply",
	"parse_subscription_reply",
	"parse_tracking_reply",
	"parse_version_capture_reply",
]
