"""
Descriptor discovery: turn decorated Python callables into HandlerDescriptors.

The registry and the dispatcher only consume plain HandlerDescriptor lists. This
module is one producer of such lists, driven by a decorator:

    from commandeer import command, create

    class Console:
        @command(alias="sa", descr="An action handler")
        def single_action():
            ...

        @command(alias="do")
        def do_things():
            ...

        @do_things.overload
        def do_things(text: str):
            ...

        @do_things.overload
        def do_things(text: str, count: int):
            ...

    dispatcher = create(Console)
    dispatcher.invoke("do hello 3")

Rules
- @command wraps a callable into a Handler; the handler is still callable and
  forwards to the first declared callback.
- @handler.overload adds another signature under the same command name. Order
  of declaration is the resolution priority.
- collect(*sources) scans classes (including their bases), modules, mappings or
  iterables for Handler objects, in definition order. A handler reachable under
  several names is collected once.
- create(*sources, **options) builds the registry and returns a Dispatcher.
"""
import functools
import types
from collections.abc import Iterable, Mapping

from .dispatcher import Dispatcher, call
from .registry import HandlerDescriptor, build
from .signatures import Signature
from .utils import Unset, coalesce, rename, view


class Handler:
    """
    A named command with one or more overload callbacks.

    Fields (read-only)
    - name: command name as declared (lowercased later by the registry).
    - callbacks: tuple of (callback, signature, alias, descr) in declaration order.
    """

    name = view("name")
    callbacks = view("callbacks")

    def __init__(self, callback, /, name=Unset, alias=None, descr=None):
        if not callable(callback):
            raise TypeError("handler 'callback' must be callable")
        if not isinstance(name := coalesce(name, getattr(callback, "__name__", Unset)), str):
            raise TypeError("handler 'name' must be a string")
        self._name = name
        self._callbacks = []
        self._append(callback, alias, descr)
        functools.update_wrapper(self, callback)

    def _append(self, callback, alias, descr):
        if alias is not None and not isinstance(alias, str):
            raise TypeError("handler 'alias' must be a string")
        if descr is not None and not isinstance(descr, str):
            raise TypeError("handler 'descr' must be a string")
        self._callbacks.append((callback, Signature.from_callable(callback), alias, descr))

    def __call__(self, *args, **kwargs):
        return self._callbacks[0][0](*args, **kwargs)

    def overload(self, source=Unset, /, alias=None, descr=None):
        """
        Register another callback under this command.

        Usable as @handler.overload or @handler.overload(descr=...). Returns the
        handler itself so the decorated name keeps pointing at the command.
        """
        @rename("overload")
        def wrapper(source, /):
            if not callable(source):
                raise TypeError("@overload() must be applied to a callable")
            self._append(source, alias, descr)
            return self

        return wrapper(source) if source is not Unset else wrapper

    def descriptors(self):
        for callback, signature, alias, descr in self._callbacks:
            yield HandlerDescriptor(self._name, signature, callback, alias, descr)

    def __rich_repr__(self):
        yield "name", self._name
        yield "overloads", tuple(signature for _, signature, _, _ in self._callbacks)

    def __repr__(self):
        return "handler(name=%r, overloads=%d)" % (self._name, len(self._callbacks))


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Handler or return a decorator to build it later.

    Invocation modes
    - Direct:     handler = command(func, name="x", alias="y")
    - Decorator:  @command(alias="y", descr="...")
    - Bare:       @command

    Parameters
    - source: Unset | Callable
    - name, alias, descr: forwarded to Handler.
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Handler(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


def _members(source):
    if isinstance(source, Handler):
        return source,
    if isinstance(source, type):
        # base-first order, but a name redefined lower in the MRO keeps only its override
        members = {}
        for klass in reversed(source.__mro__):
            members.update(vars(klass))
        return members.values()
    if isinstance(source, types.ModuleType):
        return vars(source).values()
    if isinstance(source, Mapping):
        return source.values()
    if isinstance(source, Iterable) and not isinstance(source, str):
        return source
    raise TypeError("collect() arguments must be classes, modules, mappings or iterables of handlers")


def collect(*sources):
    """
    Gather HandlerDescriptors from the given sources, in definition order.
    """
    seen = set()
    descriptors = []
    for source in sources:
        for member in _members(source):
            if not isinstance(member, Handler) or id(member) in seen:
                continue
            seen.add(id(member))
            descriptors.extend(member.descriptors())
    return descriptors


def create(*sources, invoker=call, **options):
    """
    Build a Dispatcher over every handler found in `sources`.

    Options (shell, fancy, colorful) are forwarded to the Dispatcher.
    """
    return Dispatcher(build(collect(*sources)), invoker, **options)


__all__ = (
    "Handler",
    "command",
    "collect",
    "create",
)
