"""Responses, answers, and one-line summaries of their record data."""

from __future__ import annotations

import base64
import struct
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

import dns.message
import dns.name
import dns.rcode
import dns.rdata
import dns.rdataclass
import dns.rdatatype


def ascii_escape(data: bytes) -> str:
    """Quote bytes, escaping quotes and backslashes, and writing bytes outside
    printable ASCII as their decimal number."""
    parts = ['"']
    for byte in data:
        if not 32 <= byte < 128:
            parts.append(f"\\{byte}")
        elif byte == ord('"'):
            parts.append('\\"')
        elif byte == ord("\\"):
            parts.append("\\\\")
        else:
            parts.append(chr(byte))
    parts.append('"')
    return "".join(parts)


_QUOTED_ESCAPES = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t", "\0": "\\0"}


def _quoted(text: str) -> str:
    parts = []
    for ch in text:
        if ch in _QUOTED_ESCAPES:
            parts.append(_QUOTED_ESCAPES[ch])
        elif not ch.isprintable():
            parts.append(f"\\u{{{ord(ch):x}}}")
        else:
            parts.append(ch)
    return '"' + "".join(parts) + '"'


def _byte_list(data: bytes) -> str:
    return "[" + ", ".join(str(b) for b in data) + "]"


def format_duration_hms(seconds: int) -> str:
    """Format seconds as days, hours, minutes and seconds, skipping leading zero units."""
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 60 * 60:
        return f"{seconds // 60}m{seconds % 60:02}s"
    if seconds < 60 * 60 * 24:
        return f"{seconds // 3600}h{(seconds % 3600) // 60:02}m{seconds % 60:02}s"
    return (
        f"{seconds // 86400}d{(seconds % 86400) // 3600}h"
        f"{(seconds % 3600) // 60:02}m{seconds % 60:02}s"
    )


@dataclass(frozen=True)
class OptRecord:
    """The contents of an OPT pseudo-record."""

    udp_payload_size: int
    higher_bits: int
    edns0_version: int
    flags: int
    data: bytes = b""


@dataclass(frozen=True)
class Answer:
    """A record from a response: a standard record, or an OPT pseudo-record when ``opt`` is set."""

    qname: dns.name.Name
    rdata: dns.rdata.Rdata | None = None
    qclass: int = dns.rdataclass.IN
    ttl: int = 0
    opt: OptRecord | None = None

    def is_standard(self) -> bool:
        """Whether this is a standard record rather than an OPT pseudo-record."""
        return self.opt is None

    @property
    def rdtype(self) -> int:
        return dns.rdatatype.OPT if self.rdata is None else self.rdata.rdtype


@dataclass(frozen=True)
class Query:
    """A question from a response."""

    qname: dns.name.Name
    qtype: int
    qclass: int


def _options_wire(options: Iterable) -> bytes:
    chunks = []
    for option in options:
        body = option.to_wire()
        chunks.append(struct.pack("!HH", int(option.otype), len(body)) + body)
    return b"".join(chunks)


def _section_answers(section) -> list[Answer]:
    return [
        Answer(rrset.name, rdata, rrset.rdclass, rrset.ttl)
        for rrset in section
        for rdata in rrset
    ]


@dataclass
class Response:
    """The parts of a received response that get displayed."""

    queries: list[Query] = field(default_factory=list)
    answers: list[Answer] = field(default_factory=list)
    authorities: list[Answer] = field(default_factory=list)
    additionals: list[Answer] = field(default_factory=list)
    error_code: int | None = None

    @classmethod
    def from_message(cls, message: dns.message.Message) -> Response:
        """Collect the sections of a response message into answers."""
        queries = [Query(rrset.name, rrset.rdtype, rrset.rdclass) for rrset in message.question]
        additionals = _section_answers(message.additional)

        opt_rrset = message.opt
        if opt_rrset is not None:
            ttl = opt_rrset.ttl
            opt = OptRecord(
                udp_payload_size=int(opt_rrset.rdclass),
                higher_bits=(ttl >> 24) & 0xFF,
                edns0_version=(ttl >> 16) & 0xFF,
                flags=ttl & 0xFFFF,
                data=_options_wire(opt_rrset[0].options) if len(opt_rrset) else b"",
            )
            additionals.append(Answer(opt_rrset.name, opt=opt))

        rcode = message.rcode()
        return cls(
            queries=queries,
            answers=_section_answers(message.answer),
            authorities=_section_answers(message.authority),
            additionals=additionals,
            error_code=None if rcode == dns.rcode.NOERROR else int(rcode),
        )


def _metres(centimetres: float) -> str:
    return f"{centimetres / 100:.2f}m"


def _coordinate(value, positive: str, negative: str) -> str:
    degrees, minutes, seconds, millis, sign = value
    hemisphere = positive if sign > 0 else negative
    return f"{degrees} {minutes} {seconds}.{millis:03} {hemisphere}"


@dataclass(frozen=True)
class TextFormat:
    """How record summaries are rendered."""

    format_durations: bool = True

    def format_duration(self, seconds: int) -> str:
        """Format a duration as computed units, or as plain seconds."""
        if self.format_durations:
            return format_duration_hms(seconds)
        return str(seconds)

    def record_payload_summary(self, rdata: dns.rdata.Rdata) -> str:
        """Summarise the data of a standard record on one line."""
        summarise = _SUMMARIES.get(rdata.rdtype)
        if summarise is None:
            return _byte_list(rdata.to_wire())
        return summarise(self, rdata)

    def pseudo_record_payload_summary(self, opt: OptRecord) -> str:
        """Summarise the data of an OPT pseudo-record on one line."""
        return (
            f"{opt.udp_payload_size} {opt.higher_bits} {opt.edns0_version} "
            f"{opt.flags} {_byte_list(opt.data)}"
        )


def _caa(fmt: TextFormat, rd) -> str:
    criticality = "critical" if rd.flags & 0x80 else "non-critical"
    return f"{ascii_escape(rd.tag)} {ascii_escape(rd.value)} ({criticality})"


def _loc(fmt: TextFormat, rd) -> str:
    return (
        f"{_metres(rd.size)} ({_metres(rd.horizontal_precision)}, "
        f"{_metres(rd.vertical_precision)}) "
        f"({_coordinate(rd.latitude, 'N', 'S')}, {_coordinate(rd.longitude, 'E', 'W')}, "
        f"{_metres(rd.altitude)})"
    )


def _naptr(fmt: TextFormat, rd) -> str:
    return (
        f"{rd.order} {rd.preference} {ascii_escape(rd.flags)} "
        f"{ascii_escape(rd.service)} {ascii_escape(rd.regexp)} {_quoted(str(rd.replacement))}"
    )


def _soa(fmt: TextFormat, rd) -> str:
    return (
        f"{_quoted(str(rd.mname))} {_quoted(str(rd.rname))} {rd.serial} "
        f"{fmt.format_duration(rd.refresh)} {fmt.format_duration(rd.retry)} "
        f"{fmt.format_duration(rd.expire)} {fmt.format_duration(rd.minimum)}"
    )


_T = dns.rdatatype

_SUMMARIES: dict[int, Callable[[TextFormat, dns.rdata.Rdata], str]] = {
    _T.A: lambda fmt, rd: str(rd.address),
    _T.AAAA: lambda fmt, rd: str(rd.address),
    _T.CAA: _caa,
    _T.CNAME: lambda fmt, rd: _quoted(str(rd.target)),
    _T.EUI48: lambda fmt, rd: _quoted(rd.to_text()),
    _T.EUI64: lambda fmt, rd: _quoted(rd.to_text()),
    _T.HINFO: lambda fmt, rd: f"{ascii_escape(rd.cpu)} {ascii_escape(rd.os)}",
    _T.LOC: _loc,
    _T.MX: lambda fmt, rd: f"{rd.preference} {_quoted(str(rd.exchange))}",
    _T.NAPTR: _naptr,
    _T.NS: lambda fmt, rd: _quoted(str(rd.target)),
    _T.OPENPGPKEY: lambda fmt, rd: _quoted(base64.b64encode(rd.key).decode("ascii")),
    _T.PTR: lambda fmt, rd: _quoted(str(rd.target)),
    _T.SSHFP: lambda fmt, rd: f"{rd.algorithm} {rd.fp_type} {rd.fingerprint.hex()}",
    _T.SOA: _soa,
    _T.SRV: lambda fmt, rd: f"{rd.priority} {rd.weight} {_quoted(str(rd.target))}:{rd.port}",
    _T.TLSA: lambda fmt, rd: (
        f"{rd.usage} {rd.selector} {rd.mtype} {_quoted(rd.cert.hex())}"
    ),
    _T.TXT: lambda fmt, rd: ", ".join(ascii_escape(s) for s in rd.strings),
    _T.URI: lambda fmt, rd: f"{rd.priority} {rd.weight} {ascii_escape(rd.target)}",
}