"""Request generation based on the user's input arguments."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

import dns.flags
import dns.message
import dns.name
import dns.rdataclass
import dns.rdatatype

from .connect import Transport, TransportType
from .resolve import ResolverType
from .txid import TxidGenerator


class UseEDNS(Enum):
    """Whether to send OPT records in requests, and whether to display them."""

    DISABLE = auto()
    SEND_AND_HIDE = auto()
    SEND_AND_SHOW = auto()

    def should_send(self) -> bool:
        """Whether the user wants to send OPT records."""
        return self is not UseEDNS.DISABLE

    def should_show(self) -> bool:
        """Whether the user wants to display received OPT records."""
        return self is UseEDNS.SEND_AND_SHOW


@dataclass(frozen=True)
class ProtocolTweaks:
    """Uncommon protocol options that the specification allows."""

    set_authoritative_flag: bool = False
    set_authentic_flag: bool = False
    set_checking_disabled_flag: bool = False
    udp_payload_size: int | None = None

    def apply(self, message: dns.message.Message) -> None:
        """Set the requested header flags and OPT payload size on an outgoing message."""
        if self.set_authoritative_flag:
            message.flags |= dns.flags.AA
        if self.set_authentic_flag:
            message.flags |= dns.flags.AD
        if self.set_checking_disabled_flag:
            message.flags |= dns.flags.CD

        if self.udp_payload_size is not None and message.edns >= 0:
            message.use_edns(
                message.edns,
                message.ednsflags,
                self.udp_payload_size,
                options=list(message.options),
            )


@dataclass
class Inputs:
    """The matrix of things the user wants queried."""

    domains: list[dns.name.Name] = field(default_factory=list)
    record_types: list[dns.rdatatype.RdataType] = field(default_factory=list)
    classes: list[dns.rdataclass.RdataClass] = field(default_factory=list)
    resolver_types: list[ResolverType] = field(default_factory=list)
    transport_types: list[TransportType] = field(default_factory=list)


@dataclass
class RequestGenerator:
    """Everything needed to generate requests for the input matrix."""

    inputs: Inputs = field(default_factory=Inputs)
    txid_generator: TxidGenerator = field(default_factory=TxidGenerator)
    edns: UseEDNS = UseEDNS.SEND_AND_HIDE
    protocol_tweaks: ProtocolTweaks = field(default_factory=ProtocolTweaks)

    def _make_request(self, qname, qtype, qclass) -> dns.message.Message:
        message = dns.message.make_query(
            qname,
            qtype,
            qclass,
            use_edns=0 if self.edns.should_send() else None,
        )
        message.id = self.txid_generator.generate()
        self.protocol_tweaks.apply(message)
        return message

    def generate(self) -> list[tuple[Transport, list[dns.message.Message]]]:
        """Pair each transport with the requests to send down it, one per searched name.

        Raises ``ResolverLookupError`` if a resolver cannot be obtained.
        """
        resolvers = [resolver_type.obtain() for resolver_type in self.inputs.resolver_types]

        request_sets = []
        for domain in self.inputs.domains:
            for qtype in self.inputs.record_types:
                for qclass in self.inputs.classes:
                    for resolver in resolvers:
                        for transport_type in self.inputs.transport_types:
                            transport = transport_type.make_transport(resolver.nameserver)
                            requests = [
                                self._make_request(qname, qtype, qclass)
                                for qname in resolver.name_list(domain)
                            ]
                            request_sets.append((transport, requests))
        return request_sets