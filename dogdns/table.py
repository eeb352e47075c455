"""Rendering tables of DNS response results."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum, auto

import dns.rdatatype

from .colours import Colours, Style
from .summary import Answer, TextFormat

_T = dns.rdatatype

_TYPE_STYLES = {
    _T.A: "a",
    _T.AAAA: "aaaa",
    _T.CAA: "caa",
    _T.CNAME: "cname",
    _T.EUI48: "eui48",
    _T.EUI64: "eui64",
    _T.HINFO: "hinfo",
    _T.LOC: "loc",
    _T.MX: "mx",
    _T.NAPTR: "naptr",
    _T.NS: "ns",
    _T.OPENPGPKEY: "openpgpkey",
    _T.PTR: "ptr",
    _T.SSHFP: "sshfp",
    _T.SOA: "soa",
    _T.SRV: "srv",
    _T.TLSA: "tlsa",
    _T.TXT: "txt",
    _T.URI: "uri",
}


class Section(Enum):
    """The section of the response that a record was read from."""

    ANSWER = auto()
    AUTHORITY = auto()
    ADDITIONAL = auto()


@dataclass(frozen=True)
class Row:
    """One rendered line of the table, before padding."""

    qtype: str
    qname: str
    ttl: str | None
    section: Section
    summary: str


@dataclass
class Table:
    """Rows built from response records, displayed as aligned columns."""

    colours: Colours
    text_format: TextFormat
    rows: list[Row] = field(default_factory=list)

    def add_row(self, answer: Answer, section: Section) -> None:
        """Add a row holding the answer's data in the given section."""
        qname = str(answer.qname)
        if answer.is_standard():
            self.rows.append(
                Row(
                    qtype=self._coloured_record_type(answer.rdata.rdtype),
                    qname=qname,
                    ttl=self.text_format.format_duration(answer.ttl),
                    section=section,
                    summary=self.text_format.record_payload_summary(answer.rdata),
                )
            )
        else:
            self.rows.append(
                Row(
                    qtype=self.colours.opt.paint("OPT"),
                    qname=qname,
                    ttl=None,
                    section=section,
                    summary=self.text_format.pseudo_record_payload_summary(answer.opt),
                )
            )

    def render(self, duration: float | None = None) -> str:
        """Return the table as text; a duration in seconds adds a timing line."""
        lines = []
        if self.rows:
            qtype_len = max(len(r.qtype) for r in self.rows)
            qname_len = max(len(r.qname) for r in self.rows)
            ttl_len = max(len(r.ttl or "") for r in self.rows)

            for r in self.rows:
                padding = " " * (qname_len - len(r.qname))
                ttl = (r.ttl or "").rjust(ttl_len)
                lines.append(
                    f"{r.qtype.rjust(qtype_len)} {self.colours.qname.paint(r.qname)} "
                    f"{padding}{ttl} {self._format_section(r.section)} {r.summary}\n"
                )

        if duration is not None:
            millis = int(round(duration * 1_000_000)) // 1000
            lines.append(f"Ran in {millis}ms\n")
        return "".join(lines)

    def print(self, duration: float | None = None) -> None:
        """Write the table to standard output."""
        sys.stdout.write(self.render(duration))

    def _coloured_record_type(self, rdtype: int) -> str:
        attribute = _TYPE_STYLES.get(rdtype)
        if attribute is None:
            return self.colours.unknown.paint(dns.rdatatype.to_text(rdtype))
        style: Style = getattr(self.colours, attribute)
        return style.paint(dns.rdatatype.to_text(rdtype))

    def _format_section(self, section: Section) -> str:
        if section is Section.ANSWER:
            return self.colours.answer.paint(" ")
        if section is Section.AUTHORITY:
            return self.colours.authority.paint("A")
        return self.colours.additional.paint("+")