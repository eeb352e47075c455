"""Turning matched command-line options into settings."""

from __future__ import annotations

import logging
import re

import dns.rdataclass

from .optparsing import Matches
from .output import OutputFormat, OutputMode, UseColours
from .requests import ProtocolTweaks, UseEDNS
from .summary import TextFormat, _quoted
from .txid import TxidGenerator

log = logging.getLogger(__name__)

_DECIMAL = re.compile(r"\+?[0-9]+")
_HEX = re.compile(r"\+?[0-9a-fA-F]+")
_U16_MAX = 0xFFFF


class OptionsError(Exception):
    """Something is wrong with the combination of options the user picked."""

    INVALID_DOMAIN = "invalid_domain"
    INVALID_EDNS = "invalid_edns"
    INVALID_QUERY_TYPE = "invalid_query_type"
    INVALID_QUERY_CLASS = "invalid_query_class"
    INVALID_TXID = "invalid_txid"
    INVALID_TWEAK = "invalid_tweak"
    QUERY_TYPE_OPT = "query_type_opt"
    MISSING_HTTPS_URL = "missing_https_url"

    _MESSAGES = {
        INVALID_DOMAIN: "Invalid domain {}",
        INVALID_EDNS: "Invalid EDNS setting {}",
        INVALID_QUERY_TYPE: "Invalid query type {}",
        INVALID_QUERY_CLASS: "Invalid query class {}",
        INVALID_TXID: "Invalid transaction ID {}",
        INVALID_TWEAK: "Invalid protocol tweak {}",
        QUERY_TYPE_OPT: "OPT request is sent by default (see -Z flag)",
        MISSING_HTTPS_URL: "You must pass a URL as a nameserver when using --https",
    }

    def __init__(self, kind: str, value: str | None = None) -> None:
        if kind not in self._MESSAGES:
            raise ValueError(f"unknown options error {kind!r}")
        template = self._MESSAGES[kind]
        message = template.format(_quoted(value)) if value is not None else template
        super().__init__(message)
        self.kind = kind
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptionsError):
            return NotImplemented
        return (self.kind, self.value) == (other.kind, other.value)

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def __repr__(self) -> str:
        return f"OptionsError({self.kind!r}, {self.value!r})"


def _parse_u16(text: str, pattern: re.Pattern, base: int) -> int | None:
    if not pattern.fullmatch(text):
        return None
    number = int(text, base)
    return number if number <= _U16_MAX else None


def parse_dec_or_hex(text: str) -> int | None:
    """Parse a 16-bit number in decimal, or in hex after ``0x``."""
    if text.startswith("0x"):
        number = _parse_u16(text[2:], _HEX, 16)
        if number is None:
            log.warning("Error parsing hex number: %r", text)
    else:
        number = _parse_u16(text, _DECIMAL, 10)
        if number is None:
            log.warning("Error parsing number: %r", text)
    return number


def is_constant_name(argument: str) -> bool:
    """Whether the argument could name a type or class: a letter, then letters or digits."""
    if not argument or not argument.isascii():
        return False
    return argument[0].isalpha() and argument.isalnum()


_CLASS_NAMES = {
    "IN": dns.rdataclass.IN,
    "CH": dns.rdataclass.CHAOS,
    "HS": dns.rdataclass.HESIOD,
}


def parse_class_name(text: str) -> dns.rdataclass.RdataClass | None:
    """The query class named by IN, CH or HS in any case, or None."""
    if not text.isascii():
        return None
    return _CLASS_NAMES.get(text.upper())


def deduce_use_colours(matches: Matches) -> UseColours:
    """When to use colours, from ``--color`` or ``--colour``."""
    setting = matches.opt_str("color") or matches.opt_str("colour") or ""
    if setting in ("automatic", "auto", ""):
        return UseColours.AUTOMATIC
    if setting in ("always", "yes"):
        return UseColours.ALWAYS
    if setting in ("never", "no"):
        return UseColours.NEVER
    log.warning("Unknown colour setting %r", setting)
    return UseColours.AUTOMATIC


def deduce_text_format(matches: Matches) -> TextFormat:
    """Durations are formatted unless ``--seconds`` was given."""
    return TextFormat(format_durations=not matches.opt_present("seconds"))


def deduce_output_format(matches: Matches) -> OutputFormat:
    """Short, JSON, or table output."""
    if matches.opt_present("short"):
        return OutputFormat(OutputMode.SHORT, text_format=deduce_text_format(matches))
    if matches.opt_present("json"):
        return OutputFormat(OutputMode.JSON)
    return OutputFormat(
        OutputMode.TEXT, deduce_use_colours(matches), deduce_text_format(matches)
    )


def deduce_edns(matches: Matches) -> UseEDNS:
    """Whether to send and show OPT records, from ``--edns``."""
    setting = matches.opt_str("edns")
    if setting is None:
        return UseEDNS.SEND_AND_HIDE
    if setting in ("disable", "off"):
        return UseEDNS.DISABLE
    if setting == "hide":
        return UseEDNS.SEND_AND_HIDE
    if setting == "show":
        return UseEDNS.SEND_AND_SHOW
    raise OptionsError(OptionsError.INVALID_EDNS, setting)


def deduce_txid(matches: Matches) -> TxidGenerator:
    """Random transaction IDs, or the one given with ``--txid``."""
    text = matches.opt_str("txid")
    if text is None:
        return TxidGenerator()
    start = parse_dec_or_hex(text)
    if start is None:
        raise OptionsError(OptionsError.INVALID_TXID, text)
    return TxidGenerator(start)


def deduce_tweaks(matches: Matches) -> ProtocolTweaks:
    """Protocol tweaks from every ``-Z`` option."""
    authoritative = authentic = checking_disabled = False
    payload_size = None

    for tweak in matches.opt_strs("Z"):
        if tweak in ("aa", "authoritative"):
            authoritative = True
        elif tweak in ("ad", "authentic"):
            authentic = True
        elif tweak in ("cd", "checking-disabled"):
            checking_disabled = True
        elif tweak.startswith("bufsize="):
            size = _parse_u16(tweak[len("bufsize="):], _DECIMAL, 10)
            if size is None:
                log.warning("Failed to parse buffer size: %r", tweak)
                raise OptionsError(OptionsError.INVALID_TWEAK, tweak)
            payload_size = size
        else:
            raise OptionsError(OptionsError.INVALID_TWEAK, tweak)

    return ProtocolTweaks(
        set_authoritative_flag=authoritative,
        set_authentic_flag=authentic,
        set_checking_disabled_flag=checking_disabled,
        udp_payload_size=payload_size,
    )