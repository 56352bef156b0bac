"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - EntityId wraps the opaque hex id string; never parsed or ordered
    - All valid states encoded as Enums: no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

EntityId = NewType("EntityId", str)
DomainName = NewType("DomainName", str)


# ─── Enums ───────────────────────────────────────────────────────

class FieldKind(str, Enum):
    """Value kinds a shape descriptor can declare."""
    STRING = "string"
    NUMBER = "number"
    ENUM = "enum"
    STRING_LIST = "string_list"
    OBJECT_LIST = "object_list"
    TIMESTAMP = "timestamp"


class InputKind(str, Enum):
    """Form input kinds: drive prompt rendering and API body validation."""
    TEXT = "text"
    NUMBER = "number"
    INTEGER = "integer"
    LIST = "list"
    DATE = "date"


class StoreStatus(str, Enum):
    """Generation store lifecycle states."""
    IDLE = "idle"
    GENERATING = "generating"
    ERROR = "error"


class SubmitPolicy(str, Enum):
    """What a store does with a submit while another generation is in flight."""
    ALLOW = "allow"      # run concurrently, collection in completion order
    REJECT = "reject"    # refuse with GenerationInFlightError
    QUEUE = "queue"      # wait for the running one, submission order


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
