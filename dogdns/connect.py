"""Transports that send DNS requests over the network."""

from __future__ import annotations

import contextlib
import ipaddress
import logging
import socket
import ssl
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto

import dns.exception
import dns.flags
import dns.message
import dns.query
import httpx

log = logging.getLogger(__name__)

_MAX_UDP_REQUEST = 512
_DNS_MESSAGE = "application/dns-message"


class TransportError(Exception):
    """A failure sending or receiving; ``phase`` says where it happened."""

    def __init__(self, message: str, phase: str = "network") -> None:
        super().__init__(message)
        self.message = message
        self.phase = phase


class _TruncatedResponseError(TransportError):
    def __init__(self) -> None:
        super().__init__("Truncated response", "network")


@contextlib.contextmanager
def _translated_errors() -> Iterator[None]:
    try:
        yield
    except TransportError:
        raise
    except dns.message.Truncated as e:
        raise _TruncatedResponseError() from e
    except dns.exception.Timeout as e:
        raise TransportError(str(e) or "Timed out", "network") from e
    except httpx.HTTPError as e:
        raise TransportError(str(e) or type(e).__name__, "http") from e
    except ssl.SSLError as e:
        raise TransportError(str(e), "tls") from e
    except EOFError as e:
        raise TransportError("Connection closed", "network") from e
    except OSError as e:
        raise TransportError(str(e), "network") from e
    except dns.exception.DNSException as e:
        raise TransportError(f"Malformed packet: {e}", "protocol") from e


def _split_endpoint(nameserver: str, default_port: int) -> tuple[str, int]:
    if nameserver.startswith("["):
        host, _, rest = nameserver[1:].partition("]")
        port_text = rest[1:] if rest.startswith(":") else ""
    elif nameserver.count(":") == 1:
        host, port_text = nameserver.split(":")
    else:
        host, port_text = nameserver, ""

    if not port_text:
        return host, default_port
    try:
        port = int(port_text)
    except ValueError:
        raise TransportError(f"Invalid nameserver {nameserver!r}", "network") from None
    if not 0 < port < 65536:
        raise TransportError(f"Invalid nameserver {nameserver!r}", "network")
    return host, port


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def _address(host: str) -> str:
    if _is_ip(host):
        return host
    try:
        infos = socket.getaddrinfo(host, None, type=socket.SOCK_STREAM)
    except socket.gaierror as e:
        raise TransportError(str(e), "network") from e
    return infos[0][4][0]


class Transport(ABC):
    """Sends a request message and returns the response message."""

    @abstractmethod
    def send(self, request: dns.message.Message) -> dns.message.Message:
        """Send the request and return the response."""


@dataclass
class UdpTransport(Transport):
    """DNS over UDP; a truncated response is an error."""

    nameserver: str
    timeout: float | None = None

    def send(self, request: dns.message.Message) -> dns.message.Message:
        host, port = _split_endpoint(self.nameserver, 53)
        with _translated_errors():
            response = dns.query.udp(request, _address(host), timeout=self.timeout, port=port)
        if response.flags & dns.flags.TC:
            raise _TruncatedResponseError()
        return response


@dataclass
class TcpTransport(Transport):
    """DNS over TCP."""

    nameserver: str
    timeout: float | None = None

    def send(self, request: dns.message.Message) -> dns.message.Message:
        host, port = _split_endpoint(self.nameserver, 53)
        with _translated_errors():
            return dns.query.tcp(request, _address(host), timeout=self.timeout, port=port)


@dataclass
class AutoTransport(Transport):
    """UDP by default, TCP for large requests or truncated responses."""

    nameserver: str
    timeout: float | None = None

    def send(self, request: dns.message.Message) -> dns.message.Message:
        tcp = TcpTransport(self.nameserver, self.timeout)
        if len(request.to_wire()) > _MAX_UDP_REQUEST:
            log.debug("Request too large for UDP; using TCP")
            return tcp.send(request)
        try:
            return UdpTransport(self.nameserver, self.timeout).send(request)
        except _TruncatedResponseError:
            log.debug("Response truncated; retrying over TCP")
            return tcp.send(request)


@dataclass
class TlsTransport(Transport):
    """DNS over TLS."""

    nameserver: str
    timeout: float | None = None

    def send(self, request: dns.message.Message) -> dns.message.Message:
        host, port = _split_endpoint(self.nameserver, 853)
        server_hostname = None if _is_ip(host) else host
        with _translated_errors():
            return dns.query.tls(
                request,
                _address(host),
                timeout=self.timeout,
                port=port,
                server_hostname=server_hostname,
            )


@dataclass
class HttpsTransport(Transport):
    """DNS over HTTPS, posting wire-format messages to a URL."""

    url: str
    timeout: float | None = None
    client: httpx.Client | None = field(default=None, repr=False, compare=False)

    def _post(self, client: httpx.Client, body: bytes) -> httpx.Response:
        return client.post(
            self.url,
            content=body,
            headers={"Content-Type": _DNS_MESSAGE, "Accept": _DNS_MESSAGE},
        )

    def send(self, request: dns.message.Message) -> dns.message.Message:
        body = request.to_wire()
        with _translated_errors():
            if self.client is None:
                with httpx.Client(timeout=self.timeout) as client:
                    response = self._post(client, body)
            else:
                response = self._post(self.client, body)

            if response.status_code != 200:
                reason = response.reason_phrase or "No reason"
                raise TransportError(
                    f"Nameserver returned HTTP {response.status_code} ({reason})", "http"
                )
            return dns.message.from_wire(response.content)


class TransportType(Enum):
    """Which protocol to send requests over."""

    AUTOMATIC = auto()
    UDP = auto()
    TCP = auto()
    TLS = auto()
    HTTPS = auto()

    def make_transport(self, param: str) -> Transport:
        """Create the transport; the parameter is a URL for HTTPS, an address otherwise."""
        kinds = {
            TransportType.AUTOMATIC: AutoTransport,
            TransportType.UDP: UdpTransport,
            TransportType.TCP: TcpTransport,
            TransportType.TLS: TlsTransport,
            TransportType.HTTPS: HttpsTransport,
        }
        return kinds[self](param)