import datetime
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

OWNER_KEY      = "owner"
TEAM_KEY       = "team"
EXPIRES_AT_KEY = "expires_at"

_FRACTION = re.compile(r"\.(\d+)")

def format_timestamp(value: datetime.datetime) -> str:
    """RFC 3339 in UTC, second precision (e.g. 2026-10-17T14:00:00Z)."""
    if value.tzinfo is not None:
        value = value.astimezone(datetime.timezone.utc)
    return value.replace(tzinfo=None, microsecond=0).isoformat() + "Z"

def parse_timestamp(value: Optional[str]) -> Optional[datetime.datetime]:
    """Parse an RFC 3339 timestamp. Returns None when missing or unparseable."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fractional digits
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed

@dataclass
class LifecycleMetadata:
    owner:      str                                 = ""
    team:       str                                 = ""
    expires_at: Optional[datetime.datetime]         = None

    def to_annotations(self) -> Dict[str, str]:
        annotations = {OWNER_KEY: self.owner, TEAM_KEY: self.team}
        if self.expires_at is not None:
            annotations[EXPIRES_AT_KEY] = format_timestamp(self.expires_at)
        return annotations

    @classmethod
    def from_annotations(cls, annotations: Optional[Dict[str, str]]) -> "LifecycleMetadata":
        annotations = annotations or {}
        return cls(
            owner=annotations.get(OWNER_KEY) or "",
            team=annotations.get(TEAM_KEY) or "",
            expires_at=parse_timestamp(annotations.get(EXPIRES_AT_KEY)),
        )

@dataclass
class NamespaceRecord:
    name:        str
    annotations: Dict[str, str]                     = field(default_factory=dict)
    created_at:  Optional[datetime.datetime]        = None

    @property
    def metadata(self) -> LifecycleMetadata:
        return LifecycleMetadata.from_annotations(self.annotations)

@dataclass
class NamespaceView:
    name:       str
    owner:      str                                 = ""
    team:       str                                 = ""
    created_at: Optional[datetime.datetime]         = None
    expires_at: Optional[datetime.datetime]         = None
    ttl:        int                                 = 0

    @classmethod
    def from_record(cls, record: NamespaceRecord, now: datetime.datetime) -> "NamespaceView":
        meta = record.metadata
        return cls(
            name=record.name,
            owner=meta.owner,
            team=meta.team,
            created_at=record.created_at,
            expires_at=meta.expires_at,
            ttl=remaining_ttl_hours(meta.expires_at, now),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dict (e.g. for JSON)."""
        return {
            "name": self.name,
            "owner": self.owner,
            "team": self.team,
            "created_at": format_timestamp(self.created_at) if self.created_at else None,
            "expires_at": format_timestamp(self.expires_at) if self.expires_at else None,
            "ttl": self.ttl,
        }

def remaining_ttl_hours(expires_at: Optional[datetime.datetime], now: datetime.datetime) -> int:
    if expires_at is None:
        return 0
    remaining = (expires_at - now).total_seconds()
    if remaining <= 0:
        return 0
    return int(remaining // 3600)
