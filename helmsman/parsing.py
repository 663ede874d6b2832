"""
Helmsman option parsing: split switches from positionals in two passes.

Switch grammar
- "--name", "--name=value", "--name value", "-n", "-n value", "-n=value".
- A literal "--" ends switch parsing; it is dropped and everything after it is
  positional.
- A lone "-" is a positional (conventionally stdin).

Passes
- Global pass (tolerant): runs first over the full residual argument list and
  consumes only the recognised global switches with their values. Anything
  else, unknown switches included, is left in place for the next pass.
- Local pass (strict): runs over what remains with the active command's
  switches. An undeclared switch raises UnknownSwitchError; the offending token
  is stripped and the pass restarts, at most once per token, so every unknown
  switch is collected exactly once.

Values
- Boolean flags: presence → True, "--no-x" → False, absence → key absent.
- Value flags: "=value" or the next token; `type` converts, `choices` checks.
  Missing value → MissingArgumentError; rejected value → InvalidArgumentError.
- Declared defaults are spliced in as literal tokens ahead of the user's
  tokens, so user values win and option handlers observe the defaults too.
- Option handlers run once per match, after a pass succeeds, in token order.
"""
from collections import namedtuple
from collections.abc import Mapping

from .faults import UnknownSwitchError, MissingArgumentError, InvalidArgumentError
from .utils import *

TERMINATOR = "--"

ParseResult = namedtuple("ParseResult", ("arguments", "options", "faults"))
ParseResult.__doc__ = "Outcome of parse(): positionals, an Options mapping and collected unknown-switch faults."


class Options(Mapping):
    """
    Read-only mapping of canonical option key → parsed value.

    Attribute access mirrors item access, except that an absent key reads as
    None instead of raising; use `in` to tell an absent flag from False.

        >>> options = Options({"verbose": True, "color": False})
        >>> options.verbose, options.color, options.quiet
        (True, False, None)
        >>> "color" in options, "quiet" in options
        (True, False)

    Keys that collide with Mapping methods (keys, items, get, ...) are only
    reachable through item access.
    """
    __slots__ = ("_values",)

    def __init__(self, values=(), /):
        object.__setattr__(self, "_values", dict(values))

    def __getitem__(self, key):
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)
        return self._values.get(name)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} object is read-only")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} object is read-only")

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join("%s=%r" % pair for pair in self._values.items()))

    def __rich_repr__(self):
        yield from self._values.items()


def is_switch(token, /):
    """
    True for tokens that look like switches ("-x", "--xy", "--xy=z").
    """
    return token.startswith("-") and token not in ("-", TERMINATOR)


def split_switch(token, /):
    """
    Split "--name=value" into ("--name", "value"); without "=" the value is Unset.
    """
    flag, separator, value = token.partition("=")
    return flag, value if separator else Unset


def lookup(specs, flag, /):
    """
    Return the spec declaring the concrete switch `flag`, or None.
    """
    for spec in specs:
        if spec.match(flag):
            return spec
    return None


def defaults(specs, /):
    """
    Collect the default injections of a spec list.

    Returns (tokens, matches): literal tokens to splice ahead of the user's
    tokens, and (spec, value) matches for defaults that cannot be spelled as a
    switch (False on a flag without a "--no-" form).
    """
    tokens = []
    matches = []
    for spec in specs:
        if (injected := spec.defaults()) is None:
            matches.append((spec, spec.default))
        else:
            tokens.extend(injected)
    return tokens, matches


def _convert(spec, token, raw, /):
    try:
        return spec.convert(raw)
    except (TypeError, ValueError) as exception:
        raise InvalidArgumentError(f"invalid argument: {token} {raw}", input=token, spec=spec) from exception


def scan(specs, tokens, /, *, strict):
    """
    Walk the tokens once, matching switches against `specs`.

    Returns (arguments, matches) where matches is a list of (spec, value) in
    token order. In tolerant mode (strict=False) unrecognised switches and the
    terminator are kept in `arguments`; in strict mode an unrecognised switch
    raises UnknownSwitchError (options: input, index) and the terminator is
    dropped.
    """
    arguments = []
    matches = []
    index = 0

    while index < len(tokens):
        token = tokens[index]
        index += 1

        if token == TERMINATOR:
            arguments.extend(tokens[index:] if strict else tokens[index - 1:])
            break
        elif not is_switch(token):
            arguments.append(token)
            continue

        flag, inline = split_switch(token)

        if (spec := lookup(specs, flag)) is None:
            if strict:
                raise UnknownSwitchError(f"invalid option: {token}", input=token, index=index - 1)
            arguments.append(token)
            continue

        if spec.boolean:
            if inline is not Unset:
                raise InvalidArgumentError(f"needless argument: {token}", input=token, spec=spec)
            matches.append((spec, not spec.negated(flag)))
            continue

        if inline is Unset:
            if index >= len(tokens):
                raise MissingArgumentError(f"missing argument: {token}", input=token, spec=spec)
            inline = tokens[index]
            index += 1

        matches.append((spec, _convert(spec, token, inline)))

    return arguments, matches


def apply(matches, values, /):
    """
    Record matches into `values` by canonical key and run option handlers.
    """
    for spec, value in matches:
        values[spec.key] = value
        if spec.handler is not Unset:
            spec.handler(value)
    return values


def parse_global(specs, tokens, /):
    """
    Tolerant pass: consume recognised global switches, keep everything else.

    Returns (arguments, proxy) where proxy maps canonical keys to the values
    of the matched global switches.
    """
    injected, matches = defaults(specs)
    arguments, scanned = scan(specs, [*injected, *tokens], strict=False)
    return arguments, apply(matches + scanned, {})


def parse_local(specs, tokens, /):
    """
    Strict pass with unknown-switch recovery.

    Returns (arguments, values, faults). Each UnknownSwitchError strips the
    offending token and restarts the pass; the number of restarts is bounded by
    the number of tokens.
    """
    injected, matches = defaults(specs)
    tokens = [*injected, *tokens]
    faults = []

    for _ in range(len(tokens) + 1):
        try:
            arguments, scanned = scan(specs, tokens, strict=True)
        except UnknownSwitchError as fault:
            if all(other.input != fault.input for other in faults):
                faults.append(fault)
            del tokens[fault.options["index"]]
        else:
            return arguments, apply(matches + scanned, {}), faults

    raise AssertionError("unreachable: every restart removes one token")


def parse(global_specs, local_specs, tokens, /):
    """
    Run the global pass, then the local pass over what it left.

    Global values are inherited by the command's options; a local option with
    the same key overrides the global one.
    """
    arguments, proxy = parse_global(global_specs, list(tokens))
    arguments, values, faults = parse_local(local_specs, arguments)
    return ParseResult(arguments, Options(proxy | values), faults)


__all__ = (
    "Options",
    "ParseResult",
    "TERMINATOR",
    "parse_global",
    "parse_local",
    "parse",
)
