"""Client for the remote license and demo service."""

from __future__ import annotations

import http.client
import re
import uuid
from dataclasses import dataclass
from enum import IntEnum
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode, urlsplit, urlunsplit
from urllib.request import urlopen

_INTEGER = re.compile(r"[+-]?\d+")
_MULTICAST_BIT = 1 << 40


class StatusCode(IntEnum):
    """Status codes the license service answers with."""

    REACTIVATED = 200
    ACTIVATED = 201
    BAD_REQUEST = 400
    UNAUTHORIZED = 401  # neither the MAC nor the IP address matches
    END_OF_DEMO = 403
    SERIAL_NOT_FOUND = 404
    SERVER_ERROR = 500
    OTHER_ERROR = 999


@dataclass(frozen=True)
class CloudAuthResponse:
    """A reply from the license service."""

    status_code: StatusCode
    body: str = ""

    @classmethod
    def from_raw(cls, raw_status: int, body: bytes | str) -> CloudAuthResponse:
        """Build a response from an HTTP status and body; unknown codes map to OTHER_ERROR."""
        try:
            status = StatusCode(raw_status)
        except ValueError:
            status = StatusCode.OTHER_ERROR
        if status is StatusCode.OTHER_ERROR and raw_status != StatusCode.OTHER_ERROR:
            status = StatusCode.OTHER_ERROR
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")
        return cls(status, body.strip())

    def demo_remainings(self) -> int:
        """The number of demo uses in the body, or -1 if the body is not a number."""
        if _INTEGER.fullmatch(self.body):
            return int(self.body)
        return -1


def _detect_mac() -> str:
    node = uuid.getnode()
    if node & _MULTICAST_BIT:
        # uuid falls back to a random node id when no hardware address is found
        return ""
    return ":".join(f"{(node >> shift) & 0xFF:02X}" for shift in range(40, -8, -8))


def mac_address() -> str:
    """The hardware address of this machine, or an empty string if none is found."""
    return _detect_mac()


class CloudAuth:
    """Talks to the license service over HTTP."""

    def __init__(self, base_url: str, mac_address: str | None = None, timeout: float = 10.0) -> None:
        self._base_url = base_url
        self._mac = _detect_mac() if mac_address is None else mac_address
        self._timeout = timeout

    def _get(self, path: str, params: dict[str, str] | None = None) -> CloudAuthResponse:
        parts = urlsplit(self._base_url)
        url = urlunsplit((parts.scheme, parts.netloc, path, urlencode(params or {}), ""))
        try:
            with urlopen(url, timeout=self._timeout) as reply:
                return CloudAuthResponse.from_raw(reply.status, reply.read())
        except HTTPError as err:
            with err:
                return CloudAuthResponse.from_raw(err.code, err.read())
        except (URLError, OSError, http.client.HTTPException):
            return CloudAuthResponse.from_raw(0, b"")

    def is_online(self) -> bool:
        """Whether the service can be reached and answers normally."""
        return self._get("/api/v4/ip").status_code == StatusCode.REACTIVATED

    def set_demo_remainings(self, remainings: int) -> CloudAuthResponse:
        """Report the local demo count; the service answers with its own count."""
        return self._get("/api/v4/demo", {"mac": self._mac, "remainings": str(remainings)})

    def activate_license(self, serial: str) -> CloudAuthResponse:
        """Ask the service to activate the given license key for this machine."""
        return self._get("/api/v4/license", {"mac": self._mac, "serial": serial.strip()})