"""Command-line option parsing."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum, auto

import dns.exception
import dns.name
import dns.rdataclass
import dns.rdatatype

from .connect import TransportType
from .logger import TRACE
from .optparsing import Matches, OptionParser
from .output import OutputFormat, UseColours
from .requests import Inputs, RequestGenerator
from .resolve import ResolverType
from .settings import (
    OptionsError,
    deduce_edns,
    deduce_output_format,
    deduce_tweaks,
    deduce_txid,
    deduce_use_colours,
    is_constant_name,
    parse_class_name,
)

log = logging.getLogger(__name__)

_U16 = re.compile(r"\+?[0-9]+")
_GENERIC_TYPE = re.compile(r"TYPE[0-9]+", re.IGNORECASE)


class HelpReason(Enum):
    """Why help is being displayed."""

    FLAG = auto()
    NO_DOMAINS = auto()


@dataclass(frozen=True)
class HelpRequest:
    """The usage text should be shown instead of running queries."""

    reason: HelpReason
    use_colours: UseColours


@dataclass(frozen=True)
class VersionRequest:
    """The version should be shown instead of running queries."""

    use_colours: UseColours


@dataclass
class Options:
    """The settings that dog runs with."""

    requests: RequestGenerator
    measure_time: bool
    format: OutputFormat


def build_parser() -> OptionParser:
    """The parser holding every command-line option."""
    single, multi, flag = OptionParser.SINGLE, OptionParser.MULTI, OptionParser.FLAG
    parser = OptionParser()

    # Query options
    parser.add("q", "query", "Host name or domain name to query", "HOST", multi)
    parser.add("t", "type", "Type of the DNS record being queried (A, MX, NS...)", "TYPE", multi)
    parser.add("n", "nameserver", "Address of the nameserver to send packets to", "ADDR", multi)
    parser.add(
        "", "class", "Network class of the DNS record being queried (IN, CH, HS)", "CLASS", multi
    )

    # Sending options
    parser.add("", "edns", "Whether to OPT in to EDNS (disable, hide, show)", "SETTING", single)
    parser.add("", "txid", "Set the transaction ID to a specific value", "NUMBER", single)
    parser.add("Z", "", "Set uncommon protocol tweaks", "TWEAKS", multi)

    # Protocol options
    parser.add("U", "udp", "Use the DNS protocol over UDP", kind=flag)
    parser.add("T", "tcp", "Use the DNS protocol over TCP", kind=flag)
    parser.add("S", "tls", "Use the DNS-over-TLS protocol", kind=flag)
    parser.add("H", "https", "Use the DNS-over-HTTPS protocol", kind=flag)

    # Output options
    parser.add("", "color", "When to use terminal colors", "WHEN", single)
    parser.add("", "colour", "When to use terminal colours", "WHEN", single)
    parser.add("J", "json", "Display the output as JSON", kind=flag)
    parser.add("", "seconds", "Do not format durations, display them as seconds", kind=flag)
    parser.add("1", "short", "Short mode: display nothing but the first result", kind=flag)
    parser.add("", "time", "Print how long the response took to arrive", kind=flag)

    # Meta options
    parser.add("v", "version", "Print version information", kind=flag)
    parser.add("?", "help", "Print list of command-line options", kind=flag)
    return parser


def _parse_number(text: str) -> int | None:
    if not _U16.fullmatch(text):
        return None
    number = int(text)
    return number if number <= 0xFFFF else None


def _is_opt(text: str) -> bool:
    return text.isascii() and text.upper() == "OPT"


def _record_type_from_name(name: str) -> dns.rdatatype.RdataType | None:
    if not name or not name.isascii() or _GENERIC_TYPE.fullmatch(name):
        return None
    try:
        return dns.rdatatype.RdataType.from_text(name)
    except (dns.exception.DNSException, ValueError):
        return None


def _encode_domain(text: str) -> dns.name.Name:
    try:
        return dns.name.from_text(text)
    except (dns.exception.DNSException, ValueError, UnicodeError):
        raise OptionsError(OptionsError.INVALID_DOMAIN, text) from None


def _load_transport_types(inputs: Inputs, matches: Matches) -> None:
    for option, transport_type in (
        ("https", TransportType.HTTPS),
        ("tls", TransportType.TLS),
        ("tcp", TransportType.TCP),
        ("udp", TransportType.UDP),
    ):
        if matches.opt_present(option):
            inputs.transport_types.append(transport_type)


def _load_named_args(inputs: Inputs, matches: Matches) -> None:
    for domain in matches.opt_strs("query"):
        inputs.domains.append(_encode_domain(domain))

    for record_name in matches.opt_strs("type"):
        if _is_opt(record_name):
            raise OptionsError(OptionsError.QUERY_TYPE_OPT)
        record_type = _record_type_from_name(record_name)
        if record_type is None:
            number = _parse_number(record_name)
            if number is None:
                raise OptionsError(OptionsError.INVALID_QUERY_TYPE, record_name)
            record_type = dns.rdatatype.RdataType.make(number)
        inputs.record_types.append(record_type)

    for nameserver in matches.opt_strs("nameserver"):
        inputs.resolver_types.append(ResolverType(nameserver))

    for class_name in matches.opt_strs("class"):
        qclass = parse_class_name(class_name)
        if qclass is None:
            number = _parse_number(class_name)
            if number is None:
                raise OptionsError(OptionsError.INVALID_QUERY_CLASS, class_name)
            qclass = dns.rdataclass.RdataClass.make(number)
        inputs.classes.append(qclass)


def _load_free_args(inputs: Inputs, matches: Matches) -> None:
    for argument in matches.free:
        if argument.startswith("@"):
            nameserver = argument[1:]
            log.log(TRACE, "Got nameserver -> %r", nameserver)
            inputs.resolver_types.append(ResolverType(nameserver))
            continue

        if is_constant_name(argument):
            if _is_opt(argument):
                raise OptionsError(OptionsError.QUERY_TYPE_OPT)
            qclass = parse_class_name(argument)
            if qclass is not None:
                log.log(TRACE, "Got qclass -> %r", argument)
                inputs.classes.append(qclass)
                continue
            record_type = _record_type_from_name(argument)
            if record_type is not None:
                log.log(TRACE, "Got qtype -> %r", argument)
                inputs.record_types.append(record_type)
                continue
            log.log(TRACE, "Got single-word domain -> %r", argument)
        else:
            log.log(TRACE, "Got domain -> %r", argument)
        inputs.domains.append(_encode_domain(argument))


def _load_fallbacks(inputs: Inputs) -> None:
    if not inputs.record_types:
        inputs.record_types.append(dns.rdatatype.A)
    if not inputs.classes:
        inputs.classes.append(dns.rdataclass.IN)
    if not inputs.resolver_types:
        inputs.resolver_types.append(ResolverType())
    if not inputs.transport_types:
        inputs.transport_types.append(TransportType.AUTOMATIC)


def deduce_inputs(matches: Matches) -> Inputs:
    """Build the query matrix from the matched options and free arguments."""
    inputs = Inputs()
    _load_transport_types(inputs, matches)
    _load_named_args(inputs, matches)
    _load_free_args(inputs, matches)
    if not inputs.resolver_types and inputs.transport_types == [TransportType.HTTPS]:
        raise OptionsError(OptionsError.MISSING_HTTPS_URL)
    _load_fallbacks(inputs)
    return inputs


def _deduce_options(matches: Matches) -> Options:
    measure_time = matches.opt_present("time")
    output_format = deduce_output_format(matches)
    requests = RequestGenerator(
        edns=deduce_edns(matches),
        txid_generator=deduce_txid(matches),
        protocol_tweaks=deduce_tweaks(matches),
        inputs=deduce_inputs(matches),
    )
    return Options(requests=requests, measure_time=measure_time, format=output_format)


def getopts(args: Iterable[str]) -> Options | HelpRequest | VersionRequest:
    """Parse the command-line arguments.

    Returns the options to run with, or a request for help or the version.
    Raises ``OptionsFormatError`` if the arguments cannot be matched, and
    ``OptionsError`` if the options are invalid together.
    """
    matches = build_parser().parse(list(args))
    use_colours = deduce_use_colours(matches)

    if matches.opt_present("version"):
        return VersionRequest(use_colours)
    if matches.opt_present("help"):
        return HelpRequest(HelpReason.FLAG, use_colours)

    options = _deduce_options(matches)
    if not options.requests.inputs.domains:
        return HelpRequest(HelpReason.NO_DOMAINS, use_colours)
    return options