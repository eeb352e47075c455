from dataclasses import replace

import dns.name
import dns.rdataclass
import dns.rdatatype
import pytest

from dogdns.connect import TransportType
from dogdns.optparsing import OptionsFormatError
from dogdns.options import (
    HelpReason,
    HelpRequest,
    Options,
    VersionRequest,
    build_parser,
    deduce_inputs,
    getopts,
)
from dogdns.output import OutputFormat, OutputMode, UseColours
from dogdns.requests import Inputs, UseEDNS
from dogdns.resolve import ResolverType
from dogdns.settings import OptionsError
from dogdns.summary import TextFormat
from dogdns.txid import TxidGenerator

IN = dns.rdataclass.IN
CH = dns.rdataclass.CHAOS
HS = dns.rdataclass.HESIOD


def fallbacks():
    return Inputs(
        domains=[],
        record_types=[dns.rdatatype.A],
        classes=[IN],
        resolver_types=[ResolverType()],
        transport_types=[TransportType.AUTOMATIC],
    )


def name(text):
    return dns.name.from_text(text)


def parsed(args):
    result = getopts(args)
    assert isinstance(result, Options), result
    return result


def assert_error(args, expected):
    with pytest.raises(OptionsError) as info:
        getopts(args)
    assert info.value == expected


# help tests


def test_help():
    assert getopts(["--help"]) == HelpRequest(HelpReason.FLAG, UseColours.AUTOMATIC)


def test_help_no_colour():
    assert getopts(["--help", "--colour=never"]) == HelpRequest(
        HelpReason.FLAG, UseColours.NEVER
    )


def test_version():
    assert getopts(["--version"]) == VersionRequest(UseColours.AUTOMATIC)


def test_version_yes_color():
    assert getopts(["--version", "--color", "always"]) == VersionRequest(UseColours.ALWAYS)


def test_fail():
    with pytest.raises(OptionsFormatError) as info:
        getopts(["--pear"])
    assert info.value == OptionsFormatError(OptionsFormatError.UNRECOGNIZED_OPTION, "pear")


def test_empty():
    assert getopts([]) == HelpRequest(HelpReason.NO_DOMAINS, UseColours.AUTOMATIC)


def test_an_unrelated_argument():
    assert getopts(["--time"]) == HelpRequest(HelpReason.NO_DOMAINS, UseColours.AUTOMATIC)


# query tests


def test_just_domain():
    options = parsed(["lookup.dog"])
    assert options.requests.inputs == replace(fallbacks(), domains=[name("lookup.dog")])


def test_just_named_domain():
    options = parsed(["-q", "lookup.dog"])
    assert options.requests.inputs == replace(fallbacks(), domains=[name("lookup.dog")])


@pytest.mark.parametrize("type_name", ["SOA", "soa"])
def test_domain_and_type(type_name):
    options = parsed(["lookup.dog", type_name])
    assert options.requests.inputs == replace(
        fallbacks(), domains=[name("lookup.dog")], record_types=[dns.rdatatype.SOA]
    )


def test_domain_and_other_type():
    options = parsed(["lookup.dog", "any"])
    assert options.requests.inputs == replace(
        fallbacks(), domains=[name("lookup.dog")], record_types=[dns.rdatatype.ANY]
    )


def test_domain_and_single_domain():
    options = parsed(["lookup.dog", "mixes"])
    assert options.requests.inputs == replace(
        fallbacks(), domains=[name("lookup.dog"), name("mixes")]
    )


def test_domain_and_nameserver():
    options = parsed(["lookup.dog", "@1.1.1.1"])
    assert options.requests.inputs == replace(
        fallbacks(),
        domains=[name("lookup.dog")],
        resolver_types=[ResolverType("1.1.1.1")],
    )


@pytest.mark.parametrize("class_name", ["CH", "ch"])
def test_domain_and_class(class_name):
    options = parsed(["lookup.dog", class_name])
    assert options.requests.inputs == replace(
        fallbacks(), domains=[name("lookup.dog")], classes=[CH]
    )


def test_all_free():
    options = parsed(["lookup.dog", "CH", "NS", "@1.1.1.1"])
    assert options.requests.inputs == replace(
        fallbacks(),
        domains=[name("lookup.dog")],
        classes=[CH],
        record_types=[dns.rdatatype.NS],
        resolver_types=[ResolverType("1.1.1.1")],
    )


@pytest.mark.parametrize("class_name, type_name", [("CH", "SOA"), ("ch", "soa")])
def test_all_parameters(class_name, type_name):
    options = parsed(
        [
            "-q", "lookup.dog",
            "--class", class_name,
            "--type", type_name,
            "--nameserver", "1.1.1.1",
        ]
    )
    assert options.requests.inputs == replace(
        fallbacks(),
        domains=[name("lookup.dog")],
        classes=[CH],
        record_types=[dns.rdatatype.SOA],
        resolver_types=[ResolverType("1.1.1.1")],
    )


def test_two_types():
    options = parsed(["-q", "lookup.dog", "--type", "SRV", "--type", "AAAA"])
    assert options.requests.inputs == replace(
        fallbacks(),
        domains=[name("lookup.dog")],
        record_types=[dns.rdatatype.SRV, dns.rdatatype.AAAA],
    )


def test_two_classes():
    options = parsed(["-q", "lookup.dog", "--class", "IN", "--class", "CH"])
    assert options.requests.inputs == replace(
        fallbacks(), domains=[name("lookup.dog")], classes=[IN, CH]
    )


def test_all_mixed_1():
    options = parsed(["lookup.dog", "--class", "CH", "SOA", "--nameserver", "1.1.1.1"])
    assert options.requests.inputs == replace(
        fallbacks(),
        domains=[name("lookup.dog")],
        classes=[CH],
        record_types=[dns.rdatatype.SOA],
        resolver_types=[ResolverType("1.1.1.1")],
    )


def test_all_mixed_2():
    options = parsed(["CH", "SOA", "MX", "IN", "-q", "lookup.dog", "--class", "HS"])
    assert options.requests.inputs == replace(
        fallbacks(),
        domains=[name("lookup.dog")],
        classes=[HS, CH, IN],
        record_types=[dns.rdatatype.SOA, dns.rdatatype.MX],
    )


def test_all_mixed_3():
    options = parsed(
        ["lookup.dog", "--nameserver", "1.1.1.1", "--nameserver", "1.0.0.1"]
    )
    assert options.requests.inputs == replace(
        fallbacks(),
        domains=[name("lookup.dog")],
        resolver_types=[ResolverType("1.1.1.1"), ResolverType("1.0.0.1")],
    )


def test_explicit_numerics():
    options = parsed(["11", "--class", "22", "--type", "33"])
    assert options.requests.inputs == replace(
        fallbacks(),
        domains=[name("11")],
        classes=[dns.rdataclass.RdataClass.make(22)],
        record_types=[dns.rdatatype.RdataType.make(33)],
    )


def test_edns_and_tweaks():
    options = parsed(["dom.ain", "--edns", "show", "-Z", "authentic"])
    assert options.requests.edns == UseEDNS.SEND_AND_SHOW
    assert options.requests.protocol_tweaks.set_authentic_flag is True


def test_two_more_tweaks():
    options = parsed(["dom.ain", "-Z", "aa", "-Z", "cd"])
    assert options.requests.protocol_tweaks.set_authoritative_flag is True
    assert options.requests.protocol_tweaks.set_checking_disabled_flag is True


def test_udp_size():
    options = parsed(["dom.ain", "-Z", "bufsize=4096"])
    assert options.requests.protocol_tweaks.udp_payload_size == 4096


def test_short_mode():
    options = parsed(["dom.ain", "--short"])
    assert options.format == OutputFormat(
        OutputMode.SHORT, text_format=TextFormat(format_durations=True)
    )


def test_short_mode_seconds():
    options = parsed(["dom.ain", "--short", "--seconds"])
    assert options.format == OutputFormat(
        OutputMode.SHORT, text_format=TextFormat(format_durations=False)
    )


def test_json_output():
    options = parsed(["dom.ain", "--json"])
    assert options.format == OutputFormat(OutputMode.JSON)


def test_specific_txid():
    options = parsed(["dom.ain", "--txid", "1234"])
    assert options.requests.txid_generator == TxidGenerator(1234)


def test_measure_time():
    assert parsed(["dom.ain", "--time"]).measure_time is True
    assert parsed(["dom.ain"]).measure_time is False


def test_all_transport_types():
    options = parsed(["dom.ain", "--https", "--tls", "--tcp", "--udp"])
    assert options.requests.inputs.transport_types == [
        TransportType.HTTPS,
        TransportType.TLS,
        TransportType.TCP,
        TransportType.UDP,
    ]


# invalid options tests


def test_invalid_named_class():
    assert_error(
        ["lookup.dog", "--class", "tubes"],
        OptionsError(OptionsError.INVALID_QUERY_CLASS, "tubes"),
    )


def test_invalid_named_class_too_big():
    assert_error(
        ["lookup.dog", "--class", "999999"],
        OptionsError(OptionsError.INVALID_QUERY_CLASS, "999999"),
    )


def test_invalid_named_type():
    assert_error(
        ["lookup.dog", "--type", "tubes"],
        OptionsError(OptionsError.INVALID_QUERY_TYPE, "tubes"),
    )


def test_invalid_named_type_too_big():
    assert_error(
        ["lookup.dog", "--type", "999999"],
        OptionsError(OptionsError.INVALID_QUERY_TYPE, "999999"),
    )


def test_invalid_txid():
    assert_error(
        ["lookup.dog", "--txid=0x10000"],
        OptionsError(OptionsError.INVALID_TXID, "0x10000"),
    )


def test_invalid_edns():
    assert_error(["--edns=yep"], OptionsError(OptionsError.INVALID_EDNS, "yep"))


def test_invalid_tweaks():
    assert_error(["-Zsleep"], OptionsError(OptionsError.INVALID_TWEAK, "sleep"))


@pytest.mark.parametrize("tweak", ["bufsize=null", "bufsize=999999999", "bufsize="])
def test_invalid_udp_size(tweak):
    assert_error(["-Z", tweak], OptionsError(OptionsError.INVALID_TWEAK, tweak))


def test_missing_https_url():
    assert_error(["--https", "lookup.dog"], OptionsError(OptionsError.MISSING_HTTPS_URL))


def test_https_with_url_is_accepted():
    options = parsed(["--https", "lookup.dog", "@https://dns.example.com/dns-query"])
    assert options.requests.inputs.resolver_types == [
        ResolverType("https://dns.example.com/dns-query")
    ]


def test_invalid_domain():
    long_label = "a" * 64 + ".dog"
    assert_error([long_label], OptionsError(OptionsError.INVALID_DOMAIN, long_label))


# opt tests


@pytest.mark.parametrize(
    "args",
    [
        ["OPT", "lookup.dog"],
        ["opt", "lookup.dog"],
        ["-t", "OPT", "lookup.dog"],
        ["-t", "opt", "lookup.dog"],
    ],
)
def test_opt(args):
    assert_error(args, OptionsError(OptionsError.QUERY_TYPE_OPT))


# direct helpers


def test_deduce_inputs_fallbacks():
    matches = build_parser().parse(["lookup.dog"])
    assert deduce_inputs(matches) == replace(fallbacks(), domains=[name("lookup.dog")])


def test_build_parser_usage_lists_options():
    usage = build_parser().usage()
    assert "--nameserver ADDR" in usage
    assert "-Z" in usage
    assert usage.startswith("Options:")


def test_help_wins_over_invalid_settings():
    assert getopts(["--help", "-Zsleep"]) == HelpRequest(HelpReason.FLAG, UseColours.AUTOMATIC)