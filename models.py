from dataclasses import dataclass
from typing import Optional, Dict, Any, List, Union

# A row as read from the CSV export: header name -> string value
RawRecord = Dict[str, str]

DEFAULT_TAG_COLOR = "#EF8C43"
ARCHIVED_STATE = "ARCHIVED"


@dataclass
class Tag:
    name: str
    color: str = DEFAULT_TAG_COLOR
    description: str = ""

    def to_payload(self) -> Dict[str, str]:
        return {"name": self.name, "color": self.color, "description": self.description}


@dataclass
class ValidatedRecord:
    title: str
    url: str
    time_added: str = ""
    tags: str = ""
    status: str = ""


@dataclass
class LivenessResult:
    is_alive: bool
    status_code: Optional[int] = None
    reason: str = ""


@dataclass
class SaveRequest:
    url: str
    client_request_id: str
    source: str = "api"
    timezone: str = "UTC"
    locale: str = "en-US"
    labels: Optional[List[Tag]] = None
    state: Optional[str] = None
    saved_at: Optional[str] = None  # ISO 8601 string
    published_at: Optional[str] = None  # ISO 8601 string

    def to_payload(self) -> Dict[str, Any]:
        """Build the SaveUrlInput dict, leaving out unset optional fields."""
        payload: Dict[str, Any] = {
            "url": self.url,
            "clientRequestId": self.client_request_id,
            "source": self.source,
            "timezone": self.timezone,
            "locale": self.locale,
        }
        if self.labels:
            payload["labels"] = [tag.to_payload() for tag in self.labels]
        if self.state:
            payload["state"] = self.state
        if self.saved_at:
            payload["savedAt"] = self.saved_at
        if self.published_at:
            payload["publishedAt"] = self.published_at
        return payload


@dataclass
class SaveResult:
    id: str
    state: str


@dataclass
class RowSuccess:
    id: str
    title: str
    url: str
    has_labels: bool = False
    is_archived: bool = False
    was_archived_in_pocket: bool = False


@dataclass
class RowSkipped:
    title: str
    url: str
    reason: str


RowOutcome = Union[RowSuccess, RowSkipped]


@dataclass(frozen=True)
class RunStatistics:
    total: int = 0
    successful: int = 0
    skipped: int = 0
    tagged: int = 0
    archived: int = 0
    skipped_archive: int = 0


@dataclass
class ImportOptions:
    unread_untagged: bool = False
    delay_ms: int = 200
    url_timeout_ms: int = 10000

    def __post_init__(self):
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms must not be negative, got {self.delay_ms}")
        if self.url_timeout_ms <= 0:
            raise ValueError(f"url_timeout_ms must be positive, got {self.url_timeout_ms}")
