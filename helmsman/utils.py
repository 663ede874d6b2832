"""
Helmsman utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the options/commands/registry layers so they
  agree on sentinel semantics, naming and read-only exposure of state.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks and help.

- mirror("attr", writable=False)
  • Property factory exposing a private backing field (self._attr). Containers are handed
    out as copies; writable mirrors refuse assignment once the owner is frozen.

- canonicalize(switch)
  • Derive the options-mapping key from a switch string ("--[no-]dry-run" → "dry_run").

Stability and contract
- Names in __all__ are supported; anything else may change without notice.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> canonicalize("--some-switch")
    'some_switch'
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when Unset appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the given object unless it is the Unset sentinel, in which case the
    provided default is returned. Falsey values like None, 0, "" or [] are
    preserved as-is; they are not treated as “unset”.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable   (updates in place)
    - rename(name) -> decorator

    Raises
    - TypeError on a non-callable target, a non-string name, a callable whose
      names cannot be updated, or a wrong number of arguments.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values so callers cannot mutate backing state.

    - Sequence (non-string, non-tuple): new list with each element processed.
    - Mapping: new dict with values processed (keys preserved).
    - Set: new set with each element processed.
    - Anything else (tuples included): returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str | tuple):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    return object


def mirror(name, /, *, writable=False):
    """
    Define a property that mirrors a private backing attribute "_{name}".

    Reads hand out copies of container values (see _immortalize). When
    `writable` is True the property also accepts assignment, unless the owner
    reports itself frozen through a truthy `_frozen` attribute, in which case
    AttributeError is raised.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    if not writable:
        return property(getter)

    @rename(name)
    def setter(self, value):
        if getattr(self, "_frozen", False):
            raise AttributeError(f"{type(self).__typename__} {name!r} cannot be changed once frozen")
        setattr(self, "_" + name, value)

    return property(getter, setter)


class IntrospectiveType(type):
    """
    Metaclass that turns declared fields into introspectable, mirrored properties.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and representations.
    - Expose every name in __introspectable__ as a read-only mirror() of "_{name}",
      and every name in __writable__ as a writable (freeze-aware) mirror.
    - Provide stable __repr__/__rich_repr__ built from __displayable__ (or
      __introspectable__ when __displayable__ is Unset).
    """
    __introspectable__ = ()
    __writable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        writable = namespace.get("__writable__", ())
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field, writable=field in writable)
                for field in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__()),
            )

        if "__repr__" not in namespace:
            self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)

        if "__rich_repr__" not in namespace:
            self.__rich_repr__ = __rich_repr__

        return self


def canonicalize(switch, /):
    """
    Return the options-mapping key for a switch string.

    Every word that follows a dash or a closing bracket is kept and joined with
    underscores, which strips leading dashes, the "[no-]" marker and any
    metavar:

    - "-h"               → "h"
    - "--trace"          → "trace"
    - "--some-switch"    → "some_switch"
    - "--[no-]feature"   → "feature"
    - "--file FILE"      → "file"
    - "--list of,things" → "list"
    """
    if not isinstance(switch, str):
        raise TypeError("canonicalize() argument must be a string")
    return "_".join(re.findall(r"[\-\]](\w+)", switch.split(" ", 1)[0]))


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "canonicalize",

    # Types
    "UnsetType",
    "IntrospectiveType",

    # Constants
    "Unset",
)
