# dogdns

`dog` is a command-line DNS client. It sends queries over UDP, TCP,
DNS-over-TLS or DNS-over-HTTPS and prints the answers as an aligned table
(coloured on a terminal), as one short line per result, or as JSON.

## Installation

Install the `dogdns` distribution with your usual Python package installer.
It needs Python 3.10 or later, depends on `dnspython` and `httpx`, and
provides the `dog` command.

## Usage

Query the A records of a domain using the system's default nameserver
(the first IPv4 `nameserver` line of `/etc/resolv.conf`, together with
its `search` list for single-label names):

    dog example.com

Arguments without a leading dash are read flexibly: a nameserver prefixed
with `@`, a class name (`IN`, `CH`, `HS`, in any case), a record type name
(`MX`, `soa`, `AAAA`...), or otherwise a domain:

    dog example.com MX @192.0.2.1
    dog example.com NS CH

The same things can be given as named options, and each may be repeated.
Every combination of domain, type, class, nameserver and transport is
queried:

    dog -q example.com -t SOA -t AAAA -n 192.0.2.1 --class IN

A nameserver may carry a port, as in `192.0.2.1:5353` or `[2001:db8::1]:53`.
`--` ends option processing; everything after it is a free argument.

### Query options

| Option | Meaning |
| --- | --- |
| `-q`, `--query HOST` | Host name or domain name to query |
| `-t`, `--type TYPE` | Type of the DNS record being queried (A, MX, NS...), or a type number up to 65535 |
| `-n`, `--nameserver ADDR` | Address of the nameserver to send packets to |
| `--class CLASS` | Network class of the record being queried (IN, CH, HS), or a class number up to 65535 |

Asking for the `OPT` type is an error: an OPT record is sent by default.

### Sending options

| Option | Meaning |
| --- | --- |
| `--edns SETTING` | `disable` (or `off`), `hide` (the default: send OPT, hide it in the output), `show` |
| `--txid NUMBER` | Set the transaction ID, in decimal or `0x` hexadecimal, up to 65535 |
| `-Z TWEAK` | `aa`/`authoritative`, `ad`/`authentic`, `cd`/`checking-disabled`, or `bufsize=NUMBER` for the OPT payload size |

### Protocol options

| Option | Meaning |
| --- | --- |
| `-U`, `--udp` | Use DNS over UDP; a truncated response is an error |
| `-T`, `--tcp` | Use DNS over TCP |
| `-S`, `--tls` | Use DNS-over-TLS (port 853 unless given) |
| `-H`, `--https` | Use DNS-over-HTTPS; the nameserver must be a URL |

Without any of these, UDP is used, switching to TCP when the request is
larger than 512 bytes or the response comes back truncated.

    dog example.com --https @https://dns.example.com/dns-query

### Output options

| Option | Meaning |
| --- | --- |
| `--color WHEN`, `--colour WHEN` | `always`/`yes`, `auto`/`automatic`, or `never`/`no` |
| `-J`, `--json` | Display the output as JSON |
| `-1`, `--short` | Display nothing but the result data, one per line |
| `--seconds` | Do not format durations such as TTLs; display them as seconds |
| `--time` | Print how long the queries took |

Colours are used automatically when standard output is a terminal, unless
the `NO_COLOR` environment variable is set.

    dog example.com --short
    dog example.com MX --json --time

### Meta options

| Option | Meaning |
| --- | --- |
| `-v`, `--version` | Print version information |
| `-?`, `--help` | Print the list of command-line options |

Running `dog` without any domain prints the option list and exits with
status 3.

## Hosts file warnings

Before querying, `dog` reads the local hosts file (`/etc/hosts`, or the
Windows equivalent). If a queried domain is listed there, it prints a
warning, because the operating system will use that entry rather than what
the DNS server answers.

## Debug logging

Set the `DOG_DEBUG` environment variable to any non-empty value to log
debug messages to standard error, or to `trace` for even more detail:

    DOG_DEBUG=trace dog example.com

## Exit status

| Code | Meaning |
| --- | --- |
| 0 | Everything turned out OK |
| 1 | There was at least one network error |
| 2 | No results in short mode (any server error, not just NXDOMAIN) |
| 3 | The command-line options were invalid |
| 4 | The system network configuration could not be read |

## Using it from Python

The command is built from parts that can be called directly:

    from dogdns.options import getopts
    from dogdns.main import run

    options = getopts(["example.com", "MX", "@192.0.2.1", "--short"])
    status = run(options)

`getopts` returns an `Options`, a `HelpRequest` or a `VersionRequest`, and
raises `OptionsFormatError` or `OptionsError` for bad arguments. `run`
returns an `ExitCode`. `dogdns.main.main(argv=None)` does everything the
`dog` command does and returns the exit status.

Lower-level pieces include `TransportType.make_transport` and the
transports in `dogdns.connect`, `Response.from_message` and
`TextFormat.record_payload_summary` in `dogdns.summary`, `Table` in
`dogdns.table`, and `OutputFormat` in `dogdns.output`.

## Limitations

- The system nameserver is only detected on POSIX systems, from
  `/etc/resolv.conf`, and only IPv4 `nameserver` lines are used. Elsewhere,
  or without such a line, a nameserver must be given explicitly.
- With `--txid`, every request uses that same transaction ID.
- In JSON output, SOA records carry only their `mname`.