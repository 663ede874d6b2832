r"""
Helmsman option specifications.

Overview
- OptionSpec: declarative description of one switch.
  • switches: canonical switch strings as declared ("-f", "--file FILE", "--[no-]color").
  • descr: display text (None when omitted).
  • value kind: boolean when the long (last) switch has no metavar, otherwise a
    value-bearing option; `type` converts the raw string and `choices` enumerates
    the accepted values.
  • default: declared default (Unset when not declared).
  • handler: optional callback invoked with the parsed value.

- Derived, read-only views
  • names: concrete switches used for matching ("--[no-]x" → "--x", "--no-x").
  • key: canonical options-mapping key ("--[no-]dry-run" → "dry_run").
  • metavar, boolean, negatable.

Declaration styles
    >>> OptionSpec("-f", "--file FILE", descr="input file")
    >>> OptionSpec.parse("-f", "--file FILE", "input file", default="a.txt")
    >>> OptionSpec("--[no-]color", descr="colorize output", default=True)

Validation highlights
- At least one switch; every switch starts with a dash and follows the
  r"--?(\[no-\])?[^\W_][\w-]*" shape, optionally followed by a metavar
  separated by a space or "=".
- Switch names are unique within a spec.
- Boolean options reject `type` and `choices`.
- handler must be callable when provided.
"""
import builtins
import re
from collections.abc import Iterable, Set

from rich.text import Text

from .utils import *

_SWITCH = re.compile(r"(?P<flag>--?(?P<negatable>\[no-\])?[^\W_][\w-]*)(?:[ =](?P<metavar>\S.*))?")


def separate_switches_from_description(*args):
    """
    Split an option declaration into its switch strings and description.

    Switches are the arguments starting with a dash; the description is the last
    argument when it is a string that does not start with a dash.

    Example
    - ("-f", "--file FILE", "input file") → (["-f", "--file FILE"], "input file")
    """
    switches = [arg for arg in args if str(arg).startswith("-")]
    description = args[-1] if args and isinstance(args[-1], str) and not args[-1].startswith("-") else Unset
    return switches, description


def _expand(flag):
    """
    Expand a "--[no-]x" flag into its two concrete forms; other flags are returned alone.
    """
    if "[no-]" in flag:
        return flag.replace("[no-]", ""), flag.replace("[no-]", "no-")
    return flag,


def _sanitize_switches(cls, metadata, /):
    """
    Validate the declared switches and derive the matching tables.

    Mutates metadata in place, adding:
    - switches: tuple of the declared strings (trimmed, order preserved).
    - names: tuple of concrete switches, in declaration order.
    - negations: frozenset of the concrete "--no-x" forms produced by "[no-]".
    - metavar: metavar of the long (last) switch, or None.
    - key: canonical options key derived from the long switch.

    Raises
    - TypeError: no switches, or a non-string entry.
    - ValueError: empty or malformed switch, or duplicated concrete names.
    """
    if not metadata["switches"]:
        raise TypeError(f"{cls.__typename__} must specify at least one switch")

    switches = []
    names = []
    negations = set()
    match = None

    for switch in metadata["switches"]:
        if not isinstance(switch, str):
            raise TypeError(f"{cls.__typename__} switches must be strings")
        elif not (switch := switch.strip()):
            raise ValueError(f"{cls.__typename__} switches cannot be empty-strings")
        elif not (match := _SWITCH.fullmatch(switch)):
            raise ValueError(f"{cls.__typename__} switch {switch!r} is not a valid shell-style switch")

        for name in _expand(match["flag"]):
            if name in names:
                raise ValueError(f"{cls.__typename__} switches cannot contain duplicates")
            names.append(name)
        if match["negatable"]:
            negations.add(match["flag"].replace("[no-]", "no-"))
        switches.append(switch)

    # The long form is the last switch, as in "-f", "--file FILE".
    metadata["switches"] = tuple(switches)
    metadata["names"] = tuple(names)
    metadata["negations"] = frozenset(negations)
    metadata["metavar"] = match["metavar"]
    metadata["key"] = canonicalize(switches[-1])

    if not metadata["key"]:
        raise ValueError(f"{cls.__typename__} switch {switches[-1]!r} does not produce an option name")


def _sanitize_metadata(cls, metadata, /):
    """
    Validate descr/type/choices/handler against the option's value kind.
    """
    if not isinstance(descr := metadata["descr"], str | Text | UnsetType):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    boolean = metadata["metavar"] is None

    if metadata["type"] is not Unset:
        if boolean:
            raise TypeError(f"boolean {cls.__typename__} cannot specify a 'type'")
        if not callable(metadata["type"]):
            raise TypeError(f"{cls.__typename__} 'type' must be callable")
    metadata["type"] = coalesce(metadata["type"], str)

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of values")
    if not isinstance(choices, Set):
        sanitized = []
        for choice in choices:
            if choice in sanitized:
                raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
            sanitized.append(choice)
        choices = tuple(sanitized)
    if boolean and choices:
        raise TypeError(f"boolean {cls.__typename__} cannot specify 'choices'")
    metadata["choices"] = choices

    if metadata["handler"] is not Unset and not callable(metadata["handler"]):
        raise TypeError(f"{cls.__typename__} 'handler' must be callable")


class OptionSpec(metaclass=IntrospectiveType):
    """
    Declarative description of one option switch.

    Instances are immutable once built; every field is exposed through a
    read-only property (see IntrospectiveType).

    Matching
    - match(name) tells whether a concrete switch belongs to this spec.
    - negated(name) tells whether it is the "--no-x" form of a negatable flag.
    """

    __introspectable__ = (
        "switches",
        "names",
        "negations",
        "key",
        "metavar",
        "descr",
        "type",
        "choices",
        "default",
        "handler",
    )

    __displayable__ = (
        "switches",
        "key",
        "descr",
        "default",
    )

    def __init__(self, *switches, descr=Unset, type=Unset, choices=(), default=Unset, handler=Unset):
        """
        Construct an OptionSpec.

        Parameters
        - switches: one or more str
          "-f", "--file", "--file FILE", "--file=FILE", "--[no-]color". The
          last switch is the long form: it names the option key and its metavar
          decides the value kind.
        - descr: Unset | str | Text
          Display text; None when omitted.
        - type: Callable (value-bearing options only)
          Converter applied to the raw string value. Defaults to str.
        - choices: Iterable (value-bearing options only)
          Accepted (converted) values.
        - default: Any
          Declared default. It is injected into the parse pass ahead of the user's
          tokens, so user values override it.
        - handler: Callable
          Invoked with the parsed value each time the switch is matched.
        """
        metadata = {
            "switches": switches,
            "descr": descr,
            "type": type,
            "choices": choices,
            "default": default,
            "handler": handler,
        }
        _sanitize_switches(builtins.type(self), metadata)
        _sanitize_metadata(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @classmethod
    def parse(cls, *args, **kwargs):
        """
        Build a spec from the positional declaration style: switches followed by an
        optional trailing description.
        """
        switches, description = separate_switches_from_description(*args)
        if description is not Unset:
            kwargs.setdefault("descr", description)
        return cls(*switches, **kwargs)

    @property
    def boolean(self):
        """
        True when the option is a presence-only flag.
        """
        return self._metavar is None

    @property
    def negatable(self):
        return bool(self._negations)

    def match(self, name, /):
        return name in self._names

    def negated(self, name, /):
        return name in self._negations

    def convert(self, value, /):
        """
        Convert a raw string value with `type` and check it against `choices`.

        Raises ValueError/TypeError from the converter, and ValueError when the
        converted value is not one of the declared choices.
        """
        value = self._type(value)
        if self._choices and value not in self._choices:
            raise ValueError("%r is not one of %s" % (value, ", ".join(map(repr, self._choices))))
        return value

    def defaults(self):
        """
        Return the literal tokens that stand for the declared default. An unset or
        None default yields [], a default that cannot be spelled as switches
        (False on a flag that is not negatable) yields None.

        - value-bearing: ["--file=<default>"]
        - boolean True:  ["--flag"]
        - boolean False: ["--no-flag"] for negatable flags
        """
        if self._default is Unset or self._default is None:
            return []
        long = [name for name in self._names if name not in self._negations][-1]
        if not self.boolean:
            return ["%s=%s" % (long, self._default)]
        if self._default:
            return [long]
        if self.negatable:
            return [min(self._negations)]
        return None


__all__ = (
    "OptionSpec",
    "separate_switches_from_description",
)
