"""
Release fetcher — one rate-gated GET against the GitHub "latest release" API.

``ReleaseFetcher.fetch()`` returns a ``FetchResult``:

  ReleaseRecord                  — normalized release
  FetchError(RATE_LIMITED)       — gate closed; no request, gate untouched
  FetchError(NETWORK)            — unbuildable request, transport failure, timeout
  FetchError(BAD_STATUS)         — any status other than 200
  FetchError(INVALID_PAYLOAD)    — not a JSON object, or no tag_name
  FetchError(NO_DOWNLOAD_URL)    — neither the package asset nor a zipball

The gate timestamp is written right after every attempt that reaches the
network, whatever the outcome.  A request that cannot be built (a non-ASCII
header value, a malformed URL) fails as NETWORK and leaves the gate alone.

A token, when configured, is sent as ``Authorization: token <value>``; it
lifts GitHub's ceiling from 60 to 5000 requests per hour and has no effect on
the local gate.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from plugin_updater.core.constants import (
    GITHUB_ACCEPT,
    HTTP_TIMEOUT_SECONDS,
    PACKAGE_FILENAME,
)
from plugin_updater.core.update.models import (
    AuthConfig,
    FetchError,
    FetchResult,
    ReleaseRecord,
)
from plugin_updater.core.update.rate_gate import RateGate

logger = structlog.get_logger()


def normalize_tag(tag: str) -> str:
    """Strip surrounding whitespace and a single leading ``v`` from a release tag."""
    tag = tag.strip()
    return tag[1:] if tag.startswith("v") else tag


def resolve_download_url(data: dict[str, Any], package_filename: str) -> str | None:
    """Prefer the asset named exactly *package_filename*, else the zipball URL."""
    assets = data.get("assets")
    if isinstance(assets, list):
        for asset in assets:
            if not isinstance(asset, dict):
                continue
            if asset.get("name") == package_filename:
                url = asset.get("browser_download_url")
                if isinstance(url, str) and url:
                    return url
    zipball = data.get("zipball_url")
    if isinstance(zipball, str) and zipball:
        return zipball
    return None


def parse_release(data: object, package_filename: str = PACKAGE_FILENAME) -> FetchResult:
    """Turn a decoded release payload into a ReleaseRecord or a FetchError."""
    if not isinstance(data, dict):
        return FetchError.invalid_payload("release payload is not a JSON object")
    tag = data.get("tag_name")
    if not isinstance(tag, str) or not tag.strip():
        return FetchError.invalid_payload("release payload has no tag_name")
    version = normalize_tag(tag)
    if not version:
        return FetchError.invalid_payload(f"tag {tag!r} carries no version")

    download_url = resolve_download_url(data, package_filename)
    if download_url is None:
        return FetchError.no_download_url(version)

    def _text(name: str) -> str:
        value = data.get(name)
        return value if isinstance(value, str) else ""

    return ReleaseRecord(
        version=version,
        source_url=_text("html_url"),
        download_url=download_url,
        published_at=_text("published_at"),
        description=_text("body"),
    )


class ReleaseFetcher:
    """
    Args:
        gate: Rate gate consulted before and stamped after every attempt.
        api_url: The "latest release" endpoint.
        auth: Optional token holder.
        user_agent: Identifies the host, e.g. ``"WordPress/6.4; https://example.com"``.
        package_filename: Asset name preferred as the download URL.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        gate: RateGate,
        *,
        api_url: str,
        auth: AuthConfig | None = None,
        user_agent: str = "plugin-updater",
        package_filename: str = PACKAGE_FILENAME,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._gate = gate
        self.api_url = api_url
        self.auth = auth or AuthConfig()
        self.user_agent = user_agent
        self.package_filename = package_filename
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": GITHUB_ACCEPT,
            "User-Agent": self.user_agent,
        }
        if self.auth.token:
            headers["Authorization"] = f"token {self.auth.token}"
        return headers

    def fetch(self) -> FetchResult:
        retry_in = self._gate.retry_in()
        if retry_in > 0:
            logger.debug("release_fetch_rate_limited", retry_in=round(retry_in))
            return FetchError.rate_limited(retry_in)

        logger.debug(
            "release_fetch_started",
            url=self.api_url,
            authenticated=self.auth.authenticated,
        )
        with httpx.Client(
            timeout=self.timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            try:
                request = client.build_request("GET", self.api_url, headers=self._headers())
            except (httpx.InvalidURL, UnicodeError) as exc:
                # Nothing was sent, so the gate stays open.
                return self._fail(FetchError.network(f"request could not be built: {exc}"))
            try:
                response = client.send(request)
            except httpx.TimeoutException as exc:
                return self._fail(FetchError.network(f"timed out after {self.timeout}s: {exc}"))
            except httpx.HTTPError as exc:
                return self._fail(FetchError.network(f"request failed: {exc}"))
            finally:
                self._gate.record_attempt()

        if response.status_code != 200:
            return self._fail(FetchError.bad_status(response.status_code))

        try:
            data = response.json()
        except ValueError as exc:
            return self._fail(FetchError.invalid_payload(f"body is not JSON: {exc}"))

        result = parse_release(data, self.package_filename)
        if isinstance(result, FetchError):
            return self._fail(result)

        logger.debug(
            "release_fetched",
            version=result.version,
            download_url=result.download_url,
        )
        return result

    def _fail(self, error: FetchError) -> FetchError:
        logger.warning(
            "release_fetch_failed",
            kind=str(error.kind),
            detail=error.detail,
            status_code=error.status_code,
            url=self.api_url,
        )
        return error
