"""Colours, colour schemes, and terminal styling."""

from __future__ import annotations

from dataclasses import dataclass

_RESET = "\x1b[0m"

_RED = "31"
_GREEN = "32"
_YELLOW = "33"
_BLUE = "34"
_PURPLE = "35"
_CYAN = "36"
_WHITE = "37"
_ON_RED = "41"


@dataclass(frozen=True)
class Style:
    """A terminal style: optional foreground and background SGR codes, and boldness."""

    foreground: str | None = None
    background: str | None = None
    bold: bool = False

    def paint(self, text: str) -> str:
        """Wrap the text in ANSI escape codes, or return it unchanged if unstyled."""
        codes = []
        if self.bold:
            codes.append("1")
        if self.foreground:
            codes.append(self.foreground)
        if self.background:
            codes.append(self.background)
        if not codes:
            return text
        return f"\x1b[{';'.join(codes)}m{text}{_RESET}"


@dataclass(frozen=True)
class Colours:
    """The styles used to paint each part of the output."""

    qname: Style = Style()

    answer: Style = Style()
    authority: Style = Style()
    additional: Style = Style()

    a: Style = Style()
    aaaa: Style = Style()
    caa: Style = Style()
    cname: Style = Style()
    eui48: Style = Style()
    eui64: Style = Style()
    hinfo: Style = Style()
    loc: Style = Style()
    mx: Style = Style()
    ns: Style = Style()
    naptr: Style = Style()
    openpgpkey: Style = Style()
    opt: Style = Style()
    ptr: Style = Style()
    sshfp: Style = Style()
    soa: Style = Style()
    srv: Style = Style()
    tlsa: Style = Style()
    txt: Style = Style()
    uri: Style = Style()
    unknown: Style = Style()

    @classmethod
    def pretty(cls) -> Colours:
        """A palette with a variety of styles; used by default."""
        return cls(
            qname=Style(_BLUE, bold=True),
            answer=Style(),
            authority=Style(_CYAN),
            additional=Style(_GREEN),
            a=Style(_GREEN, bold=True),
            aaaa=Style(_GREEN, bold=True),
            caa=Style(_RED),
            cname=Style(_YELLOW),
            eui48=Style(_YELLOW),
            eui64=Style(_YELLOW, bold=True),
            hinfo=Style(_YELLOW),
            loc=Style(_YELLOW),
            mx=Style(_CYAN),
            naptr=Style(_GREEN),
            ns=Style(_RED),
            openpgpkey=Style(_CYAN),
            opt=Style(_PURPLE),
            ptr=Style(_RED),
            sshfp=Style(_CYAN),
            soa=Style(_PURPLE),
            srv=Style(_CYAN),
            tlsa=Style(_YELLOW),
            txt=Style(_YELLOW),
            uri=Style(_YELLOW),
            unknown=Style(_WHITE, _ON_RED),
        )

    @classmethod
    def plain(cls) -> Colours:
        """A palette with no styles, rendering plain text."""
        return cls()