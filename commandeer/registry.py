"""
Command registry: group handler descriptors into commands and index them by key.

What this module provides
- HandlerDescriptor: the caller-owned input record (name, signature, handler,
  alias, descr). `handler` is opaque here; only the invocation collaborator
  interprets it.
- Overload: one (signature, handler) candidate of a command.
- CommandEntry: a command group with its ordered overloads and metadata.
- Registry: the immutable key → CommandEntry mapping produced by build().
- build(descriptors): the registry builder.

Keys
- the lowercase name of every group (canonical key),
- every explicit alias,
- the raw (as-declared) name when it differs from the canonical key and is free.
Several keys reference the same CommandEntry instance, never a copy.

Ordering
- Overloads keep descriptor input order. That order is the resolution priority:
  the dispatcher takes the first overload that matches, not the most specific one.

Failure
- Alias conflicts raise DuplicateAliasError; malformed descriptors raise
  RegistryError. There is no partially built registry.
"""
import logging
from collections import namedtuple
from collections.abc import Mapping
from types import MappingProxyType

from .faults import RegistryError, DuplicateAliasError, FaultCode, getdoc
from .signatures import Signature
from .utils import view

logger = logging.getLogger(__name__)

HandlerDescriptor = namedtuple("HandlerDescriptor", ("name", "signature", "handler", "alias", "descr"), defaults=(
    None,
    None,
))

Overload = namedtuple("Overload", ("signature", "handler"))


class CommandEntry:
    """
    A command group: every overload sharing one canonical name.

    Fields (read-only)
    - name: canonical lowercase name.
    - alias: explicit alias, or None (the last non-empty declaration wins).
    - descr: short description, or None (the last non-empty declaration wins).
    - overloads: tuple of Overload in registration order.
    """

    name = view("name")
    alias = view("alias")
    descr = view("descr")
    overloads = view("overloads")

    def __init__(self, name, /, alias=None, descr=None):
        self._name = name
        self._alias = alias
        self._descr = descr
        self._overloads = []

    def __rich_repr__(self):
        yield "name", self._name
        yield "alias", self._alias, None
        yield "descr", self._descr, None
        yield "overloads", tuple(self._overloads)

    def __repr__(self):
        return "command-entry(name=%r, alias=%r, overloads=%d)" % (self._name, self._alias, len(self._overloads))


class Registry(Mapping):
    """
    Immutable lookup table from command key to CommandEntry.

    Built once via build(); read-only afterwards, so concurrent lookups need no
    locking.
    """

    def __init__(self, commands=(), /):
        self._commands = MappingProxyType(dict(commands))

    def __getitem__(self, key, /):
        return self._commands[key]

    def __iter__(self):
        return iter(self._commands)

    def __len__(self):
        return len(self._commands)

    @property
    def entries(self):
        """unique command entries in registration order."""
        return tuple({id(entry): entry for entry in self._commands.values()}.values())

    def __rich_repr__(self):
        for key, entry in self._commands.items():
            yield key, entry

    def __repr__(self):
        return "registry(%s)" % ", ".join(map(repr, self._commands))


def _check_name(field, value, *, optional=False):
    if value is None and optional:
        return
    if not isinstance(value, str) or not value or " " in value:
        raise RegistryError(
            "handler descriptor %r must be a non-empty string without spaces, got %r" % (field, value),
            title="invalid descriptor",
            code=FaultCode.INVALID_DESCRIPTOR,
            hint="use a single word for command names and aliases",
            docs=getdoc(FaultCode.INVALID_DESCRIPTOR),
        )


def _validate(descriptor):
    if not isinstance(descriptor, HandlerDescriptor):
        raise TypeError("build() argument must be an iterable of handler descriptors")
    _check_name("name", descriptor.name)
    _check_name("alias", descriptor.alias, optional=True)
    if not isinstance(descriptor.signature, Signature):
        raise RegistryError(
            "handler descriptor %r has no valid signature" % descriptor.name,
            title="invalid descriptor",
            code=FaultCode.INVALID_DESCRIPTOR,
            hint="build the signature with Signature(...) or Signature.from_callable(...)",
            docs=getdoc(FaultCode.INVALID_DESCRIPTOR),
        )
    if descriptor.descr is not None and not isinstance(descriptor.descr, str):
        raise TypeError("handler descriptor 'descr' must be a string")


def build(descriptors, /):
    """
    Build the immutable Registry from an ordered iterable of HandlerDescriptor.

    Steps (per descriptor, in input order)
    1. group by lowercase name, appending the overload to the group;
    2. register the explicit alias, failing when it is already taken by any
       group, including the descriptor's own;
    3. register the raw name when it is not already a key.

    Raises
    - DuplicateAliasError on alias conflicts (the fault carries the alias and
      both conflicting names).
    - RegistryError on malformed descriptors.
    - TypeError when an item is not a HandlerDescriptor.
    """
    commands = {}

    for descriptor in descriptors:
        _validate(descriptor)
        key = descriptor.name.lower()

        try:
            entry = commands[key]
        except KeyError:
            entry = commands[key] = CommandEntry(key)
            logger.debug("registered command %r", key)

        if entry.name != key:
            # the canonical key is already claimed as another group's alias
            raise DuplicateAliasError(
                "command name %r is already an alias of %r" % (key, entry.name),
                title="duplicate alias",
                code=FaultCode.DUPLICATE_ALIAS,
                alias=key,
                names=(entry.name, key),
                hint="rename the command or the alias of %r" % entry.name,
                docs=getdoc(FaultCode.DUPLICATE_ALIAS),
            )

        entry._overloads.append(Overload(descriptor.signature, descriptor.handler))
        entry._alias = descriptor.alias or entry.alias
        entry._descr = descriptor.descr or entry.descr

        if descriptor.alias is not None:
            try:
                grouped = commands[descriptor.alias]
            except KeyError:
                commands[descriptor.alias] = entry
                logger.debug("registered alias %r for command %r", descriptor.alias, key)
            else:
                if grouped is entry:
                    raise DuplicateAliasError(
                        "cannot re-define existing alias %r of command %r" % (descriptor.alias, key),
                        title="duplicate alias",
                        code=FaultCode.DUPLICATE_ALIAS,
                        alias=descriptor.alias,
                        names=(key, key),
                        hint="declare the alias on a single overload only",
                        docs=getdoc(FaultCode.DUPLICATE_ALIAS),
                    )
                raise DuplicateAliasError(
                    "alias %r of command %r is already used by command %r" % (descriptor.alias, key, grouped.name),
                    title="duplicate alias",
                    code=FaultCode.DUPLICATE_ALIAS,
                    alias=descriptor.alias,
                    names=(grouped.name, key),
                    hint="pick another alias for %r" % key,
                    docs=getdoc(FaultCode.DUPLICATE_ALIAS),
                )

        if descriptor.name not in commands:
            commands[descriptor.name] = entry
            logger.debug("registered raw name %r for command %r", descriptor.name, key)

    for entry in {id(entry): entry for entry in commands.values()}.values():
        entry._overloads = tuple(entry._overloads)

    return Registry(commands)


__all__ = (
    "HandlerDescriptor",
    "Overload",
    "CommandEntry",
    "Registry",
    "build",
)
