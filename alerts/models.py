"""
alerts/models.py -- Domain dataclass for the alert resource.

Pure data container with zero logic. Ownership scoping, soft delete and
timestamps are enforced in alerts/store.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Alert:
    """A user's alert. Exactly one owner, fixed at creation.

    address, alert_condition and time are free-form business fields the
    service stores without interpreting. deleted is a soft-delete flag:
    the row stays in the store and can be restored.

    modified is the server-side UTC timestamp of the latest write. Clients
    cannot set it.

    id is None before the record is written to the database.
    """

    user_id: int
    address: str
    alert_condition: str
    time: str
    pinned: bool = False
    deleted: bool = False
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    modified: str = ""  # ISO 8601, set by store on every write
