"""Text and JSON output."""

from __future__ import annotations

import base64
import json
import os
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum, auto

import dns.rdata
import dns.rdataclass
import dns.rdatatype

from .colours import Colours
from .connect import TransportError
from .summary import Answer, Query, Response, TextFormat, _coordinate, _metres
from .table import Section, Table

_T = dns.rdatatype


class UseColours(Enum):
    """When to use colours in the output."""

    ALWAYS = auto()
    AUTOMATIC = auto()
    NEVER = auto()

    def should_use_colours(self) -> bool:
        """Whether to colour: forced on, or automatic with a terminal and no NO_COLOR."""
        return self is UseColours.ALWAYS or (
            sys.stdout.isatty()
            and os.environ.get("NO_COLOR") is None
            and self is not UseColours.NEVER
        )

    def palette(self) -> Colours:
        """The colour palette to paint with."""
        return Colours.pretty() if self.should_use_colours() else Colours.plain()


class OutputMode(Enum):
    """The overall shape of the output."""

    TEXT = auto()
    SHORT = auto()
    JSON = auto()


def _lossy(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _json_class(rdclass: int) -> str | int:
    names = {
        dns.rdataclass.IN: "IN",
        dns.rdataclass.CHAOS: "CH",
        dns.rdataclass.HESIOD: "HS",
    }
    return names.get(rdclass, int(rdclass))


def _json_type_name(rdtype: int) -> str | int:
    text = dns.rdatatype.to_text(rdtype)
    if text.startswith("TYPE") and text[4:].isdigit():
        return int(rdtype)
    return text


def _json_loc(rd) -> dict:
    wire = rd.to_wire()
    return {
        "size": _metres(rd.size),
        "precision": {"horizontal": wire[2], "vertical": wire[3]},
        "point": {
            "latitude": _coordinate(rd.latitude, "N", "S"),
            "longitude": _coordinate(rd.longitude, "E", "W"),
            "altitude": _metres(rd.altitude),
        },
    }


_JSON_DATA: dict[int, Callable[[dns.rdata.Rdata], dict]] = {
    _T.A: lambda rd: {"address": str(rd.address)},
    _T.AAAA: lambda rd: {"address": str(rd.address)},
    _T.CAA: lambda rd: {
        "critical": bool(rd.flags & 0x80),
        "tag": _lossy(rd.tag),
        "value": _lossy(rd.value),
    },
    _T.CNAME: lambda rd: {"domain": str(rd.target)},
    _T.EUI48: lambda rd: {"identifier": rd.to_text()},
    _T.EUI64: lambda rd: {"identifier": rd.to_text()},
    _T.HINFO: lambda rd: {"cpu": _lossy(rd.cpu), "os": _lossy(rd.os)},
    _T.LOC: _json_loc,
    _T.MX: lambda rd: {"preference": rd.preference, "exchange": str(rd.exchange)},
    _T.NAPTR: lambda rd: {
        "order": rd.order,
        "flags": _lossy(rd.flags),
        "service": _lossy(rd.service),
        "regex": _lossy(rd.regexp),
        "replacement": str(rd.replacement),
    },
    _T.NS: lambda rd: {"nameserver": str(rd.target)},
    _T.OPENPGPKEY: lambda rd: {"key": base64.b64encode(rd.key).decode("ascii")},
    _T.PTR: lambda rd: {"cname": str(rd.target)},
    _T.SSHFP: lambda rd: {
        "algorithm": rd.algorithm,
        "fingerprint_type": rd.fp_type,
        "fingerprint": rd.fingerprint.hex(),
    },
    _T.SOA: lambda rd: {"mname": str(rd.mname)},
    _T.SRV: lambda rd: {
        "priority": rd.priority,
        "weight": rd.weight,
        "port": rd.port,
        "target": str(rd.target),
    },
    _T.TLSA: lambda rd: {
        "certificate_usage": rd.usage,
        "selector": rd.selector,
        "matching_type": rd.mtype,
        "certificate_data": rd.cert.hex(),
    },
    _T.TXT: lambda rd: {"messages": [_lossy(s) for s in rd.strings]},
    _T.URI: lambda rd: {
        "priority": rd.priority,
        "weight": rd.weight,
        "target": _lossy(rd.target),
    },
}


def json_record_data(rdata: dns.rdata.Rdata) -> dict:
    """The data of a received record as a JSON-ready dictionary."""
    serialise = _JSON_DATA.get(rdata.rdtype)
    if serialise is None:
        return {"bytes": list(rdata.to_wire())}
    return serialise(rdata)


def _json_queries(queries: Iterable[Query]) -> list[dict]:
    return [
        {
            "name": str(q.qname),
            "class": _json_class(q.qclass),
            "type": _json_type_name(q.qtype),
        }
        for q in queries
    ]


def _json_answer(answer: Answer) -> dict:
    if answer.is_standard():
        return {
            "name": str(answer.qname),
            "class": _json_class(answer.qclass),
            "ttl": answer.ttl,
            "type": _json_type_name(answer.rdata.rdtype),
            "data": json_record_data(answer.rdata),
        }
    return {
        "name": str(answer.qname),
        "type": "OPT",
        "data": {"version": answer.opt.edns0_version, "data": list(answer.opt.data)},
    }


def _json_answers(answers: Iterable[Answer]) -> list[dict]:
    return [_json_answer(a) for a in answers]


def _dump(obj) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


_RCODE_MESSAGES = {
    1: "Format Error",
    2: "Server Failure",
    3: "NXDomain",
    4: "Not Implemented",
    5: "Query Refused",
    16: "Bad Version",
}


def error_code_message(rcode: int) -> str:
    """Describe the error code field of a response that the server marked as failed."""
    if rcode in _RCODE_MESSAGES:
        return f"Status: {_RCODE_MESSAGES[rcode]}"
    if 3841 <= rcode <= 4095:
        return f"Status: Private Reason ({rcode})"
    return f"Status: Other Failure ({rcode})"


@dataclass(frozen=True)
class OutputFormat:
    """How to format the output: text, one short line per answer, or JSON."""

    mode: OutputMode = OutputMode.TEXT
    use_colours: UseColours = UseColours.AUTOMATIC
    text_format: TextFormat = TextFormat()

    def print(self, responses: list[Response], duration: float | None = None) -> bool:
        """Print all the responses; return False if short mode found no results."""
        if self.mode is OutputMode.SHORT:
            return self._print_short(responses)
        if self.mode is OutputMode.JSON:
            self._print_json(responses, duration)
        else:
            self._print_text(responses, duration)
        return True

    def _print_short(self, responses: list[Response]) -> bool:
        answers = [a for response in responses for a in response.answers]
        if not answers:
            print("No results", file=sys.stderr)
            return False
        for answer in answers:
            if answer.is_standard():
                print(self.text_format.record_payload_summary(answer.rdata))
            else:
                print(self.text_format.pseudo_record_payload_summary(answer.opt))
        return True

    def _print_json(self, responses: list[Response], duration: float | None) -> None:
        objects = [
            {
                "queries": _json_queries(r.queries),
                "answers": _json_answers(r.answers),
                "authorities": _json_answers(r.authorities),
                "additionals": _json_answers(r.additionals),
            }
            for r in responses
        ]
        document: dict = {"responses": objects}
        if duration is not None:
            micros = int(round(duration * 1_000_000))
            secs, rest = divmod(micros, 1_000_000)
            document["duration"] = {"secs": secs, "millis": rest // 1000}
        print(_dump(document))

    def _print_text(self, responses: list[Response], duration: float | None) -> None:
        table = Table(self.use_colours.palette(), self.text_format)
        for response in responses:
            if response.error_code is not None:
                print(error_code_message(response.error_code))
            for answer in response.answers:
                table.add_row(answer, Section.ANSWER)
            for answer in response.authorities:
                table.add_row(answer, Section.AUTHORITY)
            for answer in response.additionals:
                table.add_row(answer, Section.ADDITIONAL)
        table.print(duration)

    def print_error(self, error: TransportError) -> None:
        """Print an error from sending or receiving packets to standard error."""
        if self.mode is OutputMode.JSON:
            document = {
                "error": True,
                "error_phase": error.phase,
                "error_message": error.message,
            }
            print(_dump(document), file=sys.stderr)
        else:
            print(f"Error [{error.phase}]: {error.message}", file=sys.stderr)