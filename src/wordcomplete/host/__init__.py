"""Host-facing surface: the view protocol and an in-process host."""

from .document import LocalDocument, Location
from .local import LocalHost, LocalView
from .view import EditRequest, HostError, View, ViewLease, ViewLeaseExpired

__all__ = [
    "EditRequest",
    "HostError",
    "LocalDocument",
    "LocalHost",
    "LocalView",
    "Location",
    "View",
    "ViewLease",
    "ViewLeaseExpired",
]
