"""Hostnames from the local hosts file, used to warn about overridden lookups."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass

import dns.exception
import dns.name

from .logger import TRACE

log = logging.getLogger(__name__)


def _default_hosts_path() -> str | None:
    if os.name == "posix":
        return "/etc/hosts"
    if os.name == "nt":
        return r"C:\Windows\system32\drivers\etc\hosts"
    return None


@dataclass(frozen=True)
class LocalHosts:
    """The set of hostnames configured in the hosts file."""

    hostnames: frozenset = frozenset()

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> LocalHosts:
        """Read hostnames from lines in hosts-file format."""
        names = set()
        for line in lines:
            content = line.split("#", 1)[0]
            for hostname in content.split()[1:]:
                try:
                    names.add(dns.name.from_text(hostname))
                except dns.exception.DNSException as e:
                    log.warning("Failed to encode local host hint %r: %s", hostname, e)
        log.log(TRACE, "%d hostname hints loaded OK.", len(names))
        return cls(frozenset(names))

    @classmethod
    def load(cls, path: str | os.PathLike | None = None) -> LocalHosts:
        """Load the hosts file at the path, or the platform's default one."""
        if path is None:
            path = _default_hosts_path()
            if path is None:
                return cls()
        log.debug("Reading hints from %s", path)
        with open(path, encoding="utf-8", errors="replace") as f:
            return cls.from_lines(f)

    def contains(self, name: dns.name.Name) -> bool:
        """Whether the name about to be queried is in the hosts file."""
        return name in self.hostnames

    __contains__ = contains