import io
import json
import sys

import dns.name
import dns.rdata
import dns.rdataclass
import dns.rdatatype
import pytest

from dogdns.colours import Colours
from dogdns.connect import TransportError
from dogdns.output import (
    OutputFormat,
    OutputMode,
    UseColours,
    error_code_message,
    json_record_data,
)
from dogdns.summary import Answer, OptRecord, Query, Response, TextFormat


def _rdata(rdtype, text):
    return dns.rdata.from_text(dns.rdataclass.IN, rdtype, text)


def _answer(name, rdtype, text, ttl=300):
    return Answer(dns.name.from_text(name), _rdata(rdtype, text), dns.rdataclass.IN, ttl)


class _FakeTerminal(io.StringIO):
    def isatty(self):
        return True


def test_always_and_never_colours():
    assert UseColours.ALWAYS.should_use_colours() is True
    assert UseColours.NEVER.should_use_colours() is False
    assert UseColours.ALWAYS.palette() == Colours.pretty()
    assert UseColours.NEVER.palette() == Colours.plain()


def test_automatic_follows_terminal_and_no_color(monkeypatch):
    monkeypatch.setattr(sys, "stdout", _FakeTerminal())
    monkeypatch.delenv("NO_COLOR", raising=False)
    assert UseColours.AUTOMATIC.should_use_colours() is True
    assert UseColours.NEVER.should_use_colours() is False
    monkeypatch.setenv("NO_COLOR", "1")
    assert UseColours.AUTOMATIC.should_use_colours() is False


def test_automatic_without_terminal(capsys):
    assert UseColours.AUTOMATIC.should_use_colours() is False


def test_short_no_results(capsys):
    fmt = OutputFormat(OutputMode.SHORT)
    assert fmt.print([Response()], None) is False
    assert capsys.readouterr().err == "No results\n"


def test_short_prints_summaries(capsys):
    opt = OptRecord(udp_payload_size=1232, higher_bits=0, edns0_version=0, flags=0)
    response = Response(
        answers=[
            _answer("lookup.dog", dns.rdatatype.A, "10.0.0.1"),
            Answer(dns.name.root, opt=opt),
        ]
    )
    fmt = OutputFormat(OutputMode.SHORT)
    assert fmt.print([response], None) is True
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["10.0.0.1", TextFormat().pseudo_record_payload_summary(opt)]


def test_json_answers(capsys):
    response = Response(
        queries=[Query(dns.name.from_text("lookup.dog"), dns.rdatatype.A, dns.rdataclass.IN)],
        answers=[_answer("lookup.dog", dns.rdatatype.A, "10.0.0.1")],
    )
    assert OutputFormat(OutputMode.JSON).print([response], None) is True
    document = json.loads(capsys.readouterr().out)
    assert "duration" not in document
    result = document["responses"][0]
    assert result["queries"] == [{"name": "lookup.dog.", "class": "IN", "type": "A"}]
    assert result["answers"] == [
        {
            "name": "lookup.dog.",
            "class": "IN",
            "ttl": 300,
            "type": "A",
            "data": {"address": "10.0.0.1"},
        }
    ]
    assert result["authorities"] == []


def test_json_is_compact_and_sorted(capsys):
    response = Response(answers=[_answer("lookup.dog", dns.rdatatype.MX, "10 mail.lookup.dog.")])
    OutputFormat(OutputMode.JSON).print([response], None)
    out = capsys.readouterr().out
    rebuilt = json.dumps(
        json.loads(out), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    assert out == rebuilt + "\n"


def test_json_duration(capsys):
    OutputFormat(OutputMode.JSON).print([], 2.5)
    document = json.loads(capsys.readouterr().out)
    assert document == {"responses": [], "duration": {"secs": 2, "millis": 500}}


def test_json_unknown_class_and_type(capsys):
    response = Response(queries=[Query(dns.name.from_text("lookup.dog"), 65280, 22)])
    OutputFormat(OutputMode.JSON).print([response], None)
    query = json.loads(capsys.readouterr().out)["responses"][0]["queries"][0]
    assert query["class"] == 22
    assert query["type"] == 65280


def test_json_opt_pseudo_record(capsys):
    opt = OptRecord(udp_payload_size=1232, higher_bits=0, edns0_version=0, flags=0, data=b"\x01\x02")
    response = Response(additionals=[Answer(dns.name.root, opt=opt)])
    OutputFormat(OutputMode.JSON).print([response], None)
    additional = json.loads(capsys.readouterr().out)["responses"][0]["additionals"][0]
    assert additional == {"name": ".", "type": "OPT", "data": {"version": 0, "data": [1, 2]}}


def test_text_prints_status_and_table(capsys):
    response = Response(
        answers=[_answer("lookup.dog", dns.rdatatype.A, "10.0.0.1")], error_code=3
    )
    fmt = OutputFormat(OutputMode.TEXT, UseColours.NEVER)
    assert fmt.print([response], None) is True
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Status: NXDomain"
    assert lines[1].endswith("10.0.0.1")


@pytest.mark.parametrize(
    "rcode, message",
    [
        (1, "Status: Format Error"),
        (2, "Status: Server Failure"),
        (3, "Status: NXDomain"),
        (4, "Status: Not Implemented"),
        (5, "Status: Query Refused"),
        (16, "Status: Bad Version"),
    ],
)
def test_error_code_messages(rcode, message):
    assert error_code_message(rcode) == message


def test_other_error_code_includes_number():
    assert error_code_message(11).startswith("Status: Other Failure (")
    assert "(11)" in error_code_message(11)


def test_print_error_text(capsys):
    OutputFormat(OutputMode.TEXT).print_error(TransportError("Truncated response", "network"))
    assert capsys.readouterr().err == "Error [network]: Truncated response\n"


def test_print_error_json(capsys):
    OutputFormat(OutputMode.JSON).print_error(TransportError("boom", "http"))
    document = json.loads(capsys.readouterr().err)
    assert document == {"error": True, "error_phase": "http", "error_message": "boom"}


def test_json_record_data_mx():
    data = json_record_data(_rdata(dns.rdatatype.MX, "10 mail.lookup.dog."))
    assert data == {"preference": 10, "exchange": "mail.lookup.dog."}


def test_json_record_data_soa_has_only_mname():
    data = json_record_data(
        _rdata(dns.rdatatype.SOA, "ns.lookup.dog. admin.lookup.dog. 1 2 3 4 5")
    )
    assert data == {"mname": "ns.lookup.dog."}


def test_json_record_data_txt_is_lossy():
    data = json_record_data(_rdata(dns.rdatatype.TXT, '"a\\255b"'))
    assert data == {"messages": ["a\ufffdb"]}


def test_json_record_data_unknown_bytes():
    data = json_record_data(_rdata(65280, r"\# 3 010203"))
    assert data == {"bytes": [1, 2, 3]}