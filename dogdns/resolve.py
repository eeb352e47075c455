"""Finding the nameserver to send requests to, and the search list."""

from __future__ import annotations

import ipaddress
import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field

import dns.exception
import dns.name

log = logging.getLogger(__name__)

_RESOLV_CONF = "/etc/resolv.conf"


class ResolverLookupError(Exception):
    """A resolver could not be obtained."""


class NoNameserverError(ResolverLookupError):
    """The configuration was read, but it named no usable nameserver."""

    def __init__(self) -> None:
        super().__init__("No nameserver found")


def _relative_labels(name: dns.name.Name) -> tuple:
    labels = name.labels
    return labels[:-1] if name.is_absolute() else labels


@dataclass
class Resolver:
    """A nameserver address and the search list for name lookup."""

    nameserver: str
    search_list: list[str] = field(default_factory=list)

    def name_list(self, name: dns.name.Name) -> list[dns.name.Name]:
        """The names to query for the given name, taking the search list into account."""
        if len(_relative_labels(name)) > 1:
            return [name]

        names = []
        for search in self.search_list:
            try:
                suffix = dns.name.from_text(search)
                names.append(dns.name.Name(_relative_labels(name) + suffix.labels))
            except dns.exception.DNSException:
                log.warning("Invalid search list: %s", search)
        names.append(name)
        return names


@dataclass(frozen=True)
class ResolverType:
    """Where a resolver comes from: the system (no nameserver) or a given nameserver."""

    nameserver: str | None = None

    def obtain(self) -> Resolver:
        """Obtain the resolver, consulting the system if no nameserver was given."""
        if self.nameserver is None:
            return system_nameservers()
        return Resolver(self.nameserver, [])


def parse_resolv_conf(lines: Iterable[str]) -> Resolver:
    """Build a resolver from lines in resolv.conf format, using the first nameserver."""
    nameservers = []
    search_list: list[str] = []
    for raw in lines:
        line = raw.rstrip("\r\n")

        if line.startswith("nameserver "):
            address = line[len("nameserver "):]
            try:
                ipaddress.IPv4Address(address)
            except ValueError as e:
                log.warning("Failed to parse nameserver line %r: %s", line, e)
            else:
                nameservers.append(address)

        if line.startswith("search "):
            search_list = line[len("search "):].split()

    if not nameservers:
        raise NoNameserverError()
    return Resolver(nameservers[0], search_list)


def system_nameservers(path: str | os.PathLike | None = None) -> Resolver:
    """Read the system resolver configuration, or the file at the given path."""
    if path is None:
        if os.name != "posix":
            log.warning("Unable to fetch default nameservers on this platform.")
            raise ResolverLookupError(
                "cannot automatically detect nameservers on this platform; "
                "you will have to provide one explicitly"
            )
        path = _RESOLV_CONF

    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            lines = f.read().splitlines()
    except OSError as e:
        raise ResolverLookupError(f"Error reading network configuration: {e}") from e
    return parse_resolv_conf(lines)