"""Objects handed to the host's update manager and details modal."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class UpdateDescriptor:
    """Entry the host update manager lists under ``response[<basename>]``."""

    slug: str
    plugin: str
    new_version: str
    url: str
    package: str
    tested: str
    requires_php: str
    icons: dict[str, str] = field(default_factory=dict)
    banners: dict[str, str] = field(default_factory=dict)
    banners_rtl: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class PluginUpdateState:
    """The host's tracked-plugins state: installed versions in, updates out."""

    checked: dict[str, str] = field(default_factory=dict)
    response: dict[str, UpdateDescriptor] = field(default_factory=dict)


@dataclass(frozen=True)
class PluginInformation:
    """Payload for the host's "View details" modal."""

    name: str
    slug: str
    version: str
    author: str
    homepage: str
    requires: str
    tested: str
    requires_php: str
    last_updated: str
    download_link: str
    sections: dict[str, str]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
