"""Splitting command-line arguments into options and free arguments."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


class OptionsFormatError(Exception):
    """The arguments could not be split into options: the ``reason`` says why."""

    UNRECOGNIZED_OPTION = "unrecognized_option"
    ARGUMENT_MISSING = "argument_missing"
    OPTION_DUPLICATED = "option_duplicated"
    UNEXPECTED_ARGUMENT = "unexpected_argument"

    _MESSAGES = {
        UNRECOGNIZED_OPTION: "Unrecognized option: '{}'",
        ARGUMENT_MISSING: "Argument to option '{}' missing",
        OPTION_DUPLICATED: "Option '{}' given more than once",
        UNEXPECTED_ARGUMENT: "Option '{}' does not take an argument",
    }

    def __init__(self, reason: str, option: str) -> None:
        if reason not in self._MESSAGES:
            raise ValueError(f"unknown failure reason {reason!r}")
        super().__init__(self._MESSAGES[reason].format(option))
        self.reason = reason
        self.option = option

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptionsFormatError):
            return NotImplemented
        return (self.reason, self.option) == (other.reason, other.option)

    def __hash__(self) -> int:
        return hash((self.reason, self.option))

    def __repr__(self) -> str:
        return f"OptionsFormatError({self.reason!r}, {self.option!r})"


@dataclass(frozen=True)
class _Spec:
    short: str
    long: str
    description: str
    hint: str
    kind: str

    @property
    def name(self) -> str:
        return self.long or self.short

    @property
    def takes_argument(self) -> bool:
        return self.kind != OptionParser.FLAG


class Matches:
    """The options found in the arguments, and the free arguments left over."""

    def __init__(self, specs: list[_Spec], values: list[list[str | None]], free: list[str]):
        self._values: dict[str, list[str | None]] = {}
        for spec, vals in zip(specs, values):
            for name in (spec.short, spec.long):
                if name:
                    self._values[name] = vals
        self.free = free

    def _lookup(self, name: str) -> list[str | None]:
        try:
            return self._values[name]
        except KeyError:
            raise KeyError(f"No option {name!r} defined") from None

    def opt_present(self, name: str) -> bool:
        """Whether the option, by its short or long name, was given."""
        return bool(self._lookup(name))

    def opt_str(self, name: str) -> str | None:
        """The first value given to the option, if any."""
        return next((v for v in self._lookup(name) if v is not None), None)

    def opt_strs(self, name: str) -> list[str]:
        """Every value given to the option, in order."""
        return [v for v in self._lookup(name) if v is not None]

    def __repr__(self) -> str:
        given = {k: v for k, v in self._values.items() if v}
        return f"Matches(options={given!r}, free={self.free!r})"


class OptionParser:
    """A set of options that arguments are matched against.

    Free arguments may appear among the options, and ``--`` ends option
    processing.
    """

    FLAG = "flag"
    SINGLE = "single"
    MULTI = "multi"

    def __init__(self) -> None:
        self._specs: list[_Spec] = []

    def add(
        self,
        short: str,
        long: str,
        description: str,
        hint: str = "",
        kind: str = FLAG,
    ) -> OptionParser:
        """Register an option; ``kind`` is ``FLAG``, ``SINGLE`` or ``MULTI``."""
        if kind not in (self.FLAG, self.SINGLE, self.MULTI):
            raise ValueError(f"unknown option kind {kind!r}")
        if len(short) > 1:
            raise ValueError(f"short option name must be one character: {short!r}")
        if not short and not long:
            raise ValueError("an option needs a short or a long name")
        self._specs.append(_Spec(short, long, description, hint, kind))
        return self

    def _find(self, attribute: str, name: str) -> int:
        for index, spec in enumerate(self._specs):
            if getattr(spec, attribute) == name:
                return index
        raise OptionsFormatError(OptionsFormatError.UNRECOGNIZED_OPTION, name)

    @staticmethod
    def _next_value(rest: Iterator[str], name: str) -> str:
        value = next(rest, None)
        if value is None:
            raise OptionsFormatError(OptionsFormatError.ARGUMENT_MISSING, name)
        return value

    def parse(self, args: Iterable[str]) -> Matches:
        """Match the arguments; raise ``OptionsFormatError`` if they do not fit."""
        values: list[list[str | None]] = [[] for _ in self._specs]
        free: list[str] = []
        rest = iter(args)

        for arg in rest:
            if arg == "--":
                free.extend(rest)
                break

            if arg.startswith("--"):
                name, has_value, attached = arg[2:].partition("=")
                index = self._find("long", name)
                if self._specs[index].takes_argument:
                    value = attached if has_value else self._next_value(rest, name)
                    values[index].append(value)
                elif has_value:
                    raise OptionsFormatError(OptionsFormatError.UNEXPECTED_ARGUMENT, name)
                else:
                    values[index].append(None)

            elif len(arg) > 1 and arg.startswith("-"):
                chars = arg[1:]
                while chars:
                    char, chars = chars[0], chars[1:]
                    index = self._find("short", char)
                    if self._specs[index].takes_argument:
                        value = chars if chars else self._next_value(rest, char)
                        values[index].append(value)
                        break
                    values[index].append(None)

            else:
                free.append(arg)

        for spec, vals in zip(self._specs, values):
            if spec.kind != self.MULTI and len(vals) > 1:
                raise OptionsFormatError(OptionsFormatError.OPTION_DUPLICATED, spec.name)

        return Matches(self._specs, values, free)

    def usage(self) -> str:
        """A listing of the options and their descriptions."""
        entries = []
        for spec in self._specs:
            names = []
            if spec.short:
                names.append(f"-{spec.short}")
            if spec.long:
                names.append(f"--{spec.long}")
            left = ", ".join(names)
            if not spec.short:
                left = "    " + left
            if spec.takes_argument and spec.hint:
                left += f" {spec.hint}"
            entries.append((f"    {left}", spec.description))

        width = max((len(left) for left, _ in entries), default=0)
        lines = ["Options:"]
        lines.extend(f"{left.ljust(width)}  {desc}".rstrip() for left, desc in entries)
        return "\n".join(lines) + "\n"