"""The command-line DNS client: option handling, running queries, exit statuses."""

from __future__ import annotations

import logging
import os
import sys
import time
from collections.abc import Sequence
from enum import IntEnum

from .colours import Style
from .connect import TransportError
from .hints import LocalHosts
from .logger import configure
from .options import HelpReason, HelpRequest, Options, VersionRequest, build_parser, getopts
from .optparsing import OptionsFormatError
from .output import UseColours
from .resolve import ResolverLookupError
from .settings import OptionsError
from .summary import Response

log = logging.getLogger(__name__)

_VERSION = "0.2.1"
_HEADING = Style("33", bold=True)
_NAME = Style("32", bold=True)


class ExitCode(IntEnum):
    """The statuses dog can exit with."""

    SUCCESS = 0
    NETWORK_ERROR = 1
    NO_SHORT_RESULTS = 2
    OPTIONS_ERROR = 3
    SYSTEM_ERROR = 4


def _usage_text(pretty: bool) -> str:
    def heading(text: str) -> str:
        return _HEADING.paint(text) if pretty else text

    listing = build_parser().usage()
    if listing.startswith("Options:"):
        listing = heading("Options:") + listing[len("Options:"):]
    return (
        f"{heading('Usage:')}\n"
        "    dog [OPTIONS] [--] <arguments>\n"
        "\n"
        f"{listing}"
    )


def _version_text(pretty: bool) -> str:
    name = _NAME.paint("dog") if pretty else "dog"
    return f"{name} \u25aa A command-line DNS client\nv{_VERSION}\n"


def _load_hints() -> LocalHosts:
    try:
        return LocalHosts.load()
    except OSError as e:
        log.warning("Error loading local host hints: %s", e)
        return LocalHosts()


def _strip_pseudo_records(response: Response) -> None:
    response.answers = [a for a in response.answers if a.is_standard()]
    response.authorities = [a for a in response.authorities if a.is_standard()]
    response.additionals = [a for a in response.additionals if a.is_standard()]


def run(options: Options) -> ExitCode:
    """Send every request the options describe, print the results, and return the status."""
    requests = options.requests
    output_format = options.format
    should_show_opt = requests.edns.should_show()
    started = time.perf_counter() if options.measure_time else None

    hints = _load_hints()
    for domain in requests.inputs.domains:
        if hints.contains(domain):
            print(f"warning: domain '{domain}' also exists in hosts file", file=sys.stderr)

    try:
        request_sets = requests.generate()
    except ResolverLookupError as e:
        print(f"Unable to obtain resolver: {e}", file=sys.stderr)
        return ExitCode.SYSTEM_ERROR

    responses: list[Response] = []
    errored = False

    for transport, request_list in request_sets:
        last = len(request_list) - 1
        for index, request in enumerate(request_list):
            try:
                message = transport.send(request)
            except TransportError as e:
                output_format.print_error(e)
                errored = True
                break

            response = Response.from_message(message)
            if response.error_code is not None and index != last:
                continue
            if not should_show_opt:
                _strip_pseudo_records(response)
            responses.append(response)
            break

    duration = time.perf_counter() - started if started is not None else None
    if not output_format.print(responses, duration):
        return ExitCode.NO_SHORT_RESULTS
    return ExitCode.NETWORK_ERROR if errored else ExitCode.SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """Parse the arguments, run the queries, and return the exit status."""
    configure(os.environ.get("DOG_DEBUG"))
    args = sys.argv[1:] if argv is None else list(argv)

    try:
        result = getopts(args)
    except (OptionsFormatError, OptionsError) as e:
        print(f"dog: Invalid options: {e}", file=sys.stderr)
        return ExitCode.OPTIONS_ERROR

    if isinstance(result, HelpRequest):
        sys.stdout.write(_usage_text(result.use_colours.should_use_colours()))
        if result.reason is HelpReason.NO_DOMAINS:
            return ExitCode.OPTIONS_ERROR
        return ExitCode.SUCCESS

    if isinstance(result, VersionRequest):
        sys.stdout.write(_version_text(result.use_colours.should_use_colours()))
        return ExitCode.SUCCESS

    log.info("Running with options -> %r", result)
    return run(result)


if __name__ == "__main__":
    sys.exit(main())