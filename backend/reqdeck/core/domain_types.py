"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - CollectionId, RequestId, ResponseId wrap str UUIDs (the document stores them as text)
    - All valid states encoded as Enums, no raw string matching
    - TableKind.BODY is the only kind whose values are typed (BodyValue)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (the workspace document is JSON)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CollectionId = NewType("CollectionId", str)
RequestId = NewType("RequestId", str)
ResponseId = NewType("ResponseId", str)


# ─── Limits ──────────────────────────────────────────────────────

RESPONSE_HISTORY_CAPACITY: int = 10
PLACEHOLDER_KEY_PREFIX: str = "row_"


# ─── Enums ───────────────────────────────────────────────────────

class TableKind(str, Enum):
    """The three parallel tables owned by every request."""
    PARAMS = "params"
    HEADERS = "headers"
    BODY = "body"

    @property
    def is_typed(self) -> bool:
        return self is TableKind.BODY


# Tab order in the request editor (params, headers, body, response)
TAB_INDEX: dict[TableKind, int] = {
    TableKind.PARAMS: 0,
    TableKind.HEADERS: 1,
    TableKind.BODY: 2,
}
RESPONSE_TAB_INDEX: int = 3


class HttpMethod(str, Enum):
    """Closed set of request methods offered by the editor."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class BodyValueType(str, Enum):
    """Discriminant of the BodyValue tagged variant."""
    STRING = "String"
    NUMBER = "Number"
    BOOL = "Bool"
    ARRAY = "Array"
    OBJECT = "Object"


class ResponseStatus(str, Enum):
    """Outcome recorded with each response history entry."""
    SUCCESS = "success"
    ERROR = "error"


class NotificationSeverity(str, Enum):
    """Severity accepted by the notification service."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class RowField(str, Enum):
    """Editable cells of a table row."""
    KEY = "key"
    VALUE = "value"
