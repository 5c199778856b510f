"""
Value types for the update-check subsystem.

ReleaseRecord  — one normalized remote release
CacheEntry     — a ReleaseRecord plus its storage time and TTL
RateLimitState — when the last remote attempt happened
AuthConfig     — optional API token
FetchError     — tagged failure of a fetch (kind + detail)
UpToDate / UpdateAvailable — the derived UpdateStatus
DisplayInfo    — what the details surface renders

``FetchResult`` (ReleaseRecord | FetchError) is the only way fetch outcomes
are communicated; nothing returns ``False`` or ``None`` to mean "failed".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


@dataclass(frozen=True)
class ReleaseRecord:
    """A discovered remote release.  ``description`` is untrusted text."""

    version: str
    source_url: str
    download_url: str
    published_at: str = ""
    description: str = ""

    def is_valid(self) -> bool:
        return bool(self.version) and bool(self.download_url)

    def to_dict(self) -> dict[str, str]:
        return {
            "version": self.version,
            "source_url": self.source_url,
            "download_url": self.download_url,
            "published_at": self.published_at,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: object) -> ReleaseRecord | None:
        """Rebuild a record from stored data; ``None`` if malformed or invalid."""
        if not isinstance(data, dict):
            return None
        values = {}
        for name in ("version", "source_url", "download_url", "published_at", "description"):
            value = data.get(name, "")
            if not isinstance(value, str):
                return None
            values[name] = value
        record = cls(**values)
        return record if record.is_valid() else None


@dataclass(frozen=True)
class CacheEntry:
    record: ReleaseRecord
    stored_at: float
    ttl_seconds: int

    def is_fresh(self, now: float) -> bool:
        return now - self.stored_at < self.ttl_seconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "record": self.record.to_dict(),
            "stored_at": self.stored_at,
            "ttl_seconds": self.ttl_seconds,
        }

    @classmethod
    def from_dict(cls, data: object) -> CacheEntry | None:
        if not isinstance(data, dict):
            return None
        record = ReleaseRecord.from_dict(data.get("record"))
        stored_at = data.get("stored_at")
        ttl = data.get("ttl_seconds")
        if record is None:
            return None
        if not isinstance(stored_at, (int, float)) or isinstance(stored_at, bool):
            return None
        if not isinstance(ttl, int) or isinstance(ttl, bool):
            return None
        return cls(record=record, stored_at=float(stored_at), ttl_seconds=ttl)


@dataclass(frozen=True)
class RateLimitState:
    last_check_at: float = 0.0


@dataclass(frozen=True)
class AuthConfig:
    """Optional GitHub token.  Raises the remote ceiling (60/h → 5000/h) only."""

    token: str | None = field(default=None, repr=False)

    @property
    def authenticated(self) -> bool:
        return bool(self.token)


# ---------------------------------------------------------------------------
# Fetch outcome
# ---------------------------------------------------------------------------


class FetchErrorKind(StrEnum):
    RATE_LIMITED = "rate_limited"
    NETWORK = "network"
    BAD_STATUS = "bad_status"
    INVALID_PAYLOAD = "invalid_payload"
    NO_DOWNLOAD_URL = "no_download_url"


@dataclass(frozen=True)
class FetchError:
    kind: FetchErrorKind
    detail: str = ""
    status_code: int | None = None

    @classmethod
    def rate_limited(cls, retry_in: float) -> FetchError:
        return cls(FetchErrorKind.RATE_LIMITED, f"next attempt allowed in {retry_in:.0f}s")

    @classmethod
    def network(cls, message: str) -> FetchError:
        return cls(FetchErrorKind.NETWORK, message)

    @classmethod
    def bad_status(cls, code: int) -> FetchError:
        return cls(FetchErrorKind.BAD_STATUS, f"release API returned status {code}", code)

    @classmethod
    def invalid_payload(cls, detail: str) -> FetchError:
        return cls(FetchErrorKind.INVALID_PAYLOAD, detail)

    @classmethod
    def no_download_url(cls, version: str) -> FetchError:
        return cls(FetchErrorKind.NO_DOWNLOAD_URL, f"release {version} has no usable download URL")


FetchResult = ReleaseRecord | FetchError


# ---------------------------------------------------------------------------
# Update status
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UpToDate:
    update_available: bool = field(default=False, init=False)


@dataclass(frozen=True)
class UpdateAvailable:
    record: ReleaseRecord
    update_available: bool = field(default=True, init=False)


UpdateStatus = UpToDate | UpdateAvailable


@dataclass(frozen=True)
class DisplayInfo:
    version: str
    published_at: str
    source_url: str
    download_url: str
    changelog: str

    def to_dict(self) -> dict[str, str]:
        return {
            "version": self.version,
            "published_at": self.published_at,
            "source_url": self.source_url,
            "download_url": self.download_url,
            "changelog": self.changelog,
        }
