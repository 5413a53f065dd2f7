"""
Faults raised by the registry builder, the coercer and the dispatcher.

Every fault is a CommandException: a message plus a read-only mapping of
options. Some options drive rendering (code, title, hint, docs). Some are
runtime flags that trigger() merges in (shell, fancy, colorful, console).
The rest is payload for callers (token, target, alias, names, input, handler,
exception).

How each family travels
- RegistryError / DuplicateAliasError: build() gives up, no registry exists.
- CoercionError: caught by the dispatcher, which moves on to the next overload.
- DispatchError: the command line itself is unusable (blank, several lines).
- InvocationError: the handler blew up under the default invoker.

Outside shell mode trigger() raises the fault. In shell mode it prints the
fault on stderr through rich and returns.

Host hooks, all optional attributes of __main__
- __prog__: program label shown in the fault header.
- __styles__: rich style overrides keyed like _STYLES below.
- __codes__: FaultCode -> label shown instead of the numeric code.
- __docs__: FaultCode -> one-line documentation, see getdoc().
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)

_STYLES = {
    "prog": "bold #D7D7E8",
    "code": "bold #3FD0FF",
    "title": "bold #FF6B9A",
    "message": "#C4C4CE",
    "arrow": "dim #8FD98F",
    "hint": "italic #8FD98F",
    "docs": "dim italic #A0A0B0",
}


def _host(name, default, /):
    return getattr(__import__("__main__"), name, default)


class FaultCode(IntEnum):
    """
    Stable numeric identifiers, one decade per domain:
    1110x registry, 1111x dispatch, 1112x coercion, 1113x invocation.
    """
    DUPLICATE_ALIAS     = 11101
    INVALID_DESCRIPTOR  = 11102

    EMPTY_INPUT         = 11111
    MULTILINE_INPUT     = 11112

    UNCASTABLE_TOKEN    = 11121

    DELEGATED_ERROR     = 11131

    def normalize(self):
        """Label for this code, remapped through __main__.__codes__ when present."""
        return str(_host("__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    Base fault. ``options`` is frozen at construction; use ``copy.replace`` to
    derive a fault with more options.
    """

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError(f"{type(self).__name__} message must be a str")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        if self.message is Unset:
            return ""
        return self.message

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        styles = defaultdict(str, _STYLES | _host("__styles__", {}))

        def styled(fragment, key):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[key] if colorful else "")

        code = self.code
        header = Text.assemble(
            "[ ",
            styled(_host("__prog__", "commandeer"), "prog"),
            " — ",
            styled(code.normalize() if code is not None else "?", "code"),
            " | ",
            styled(str(self.options.get("title", "error")).title(), "title"),
            " ]",
        )

        body = [styled(str(self), "message")]
        if hint := self.options.get("hint"):
            body.append(Text.assemble(styled(" → ", "arrow"), styled(hint, "hint")))
        if docs := self.options.get("docs"):
            body.append(styled(docs, "docs"))

        if self.options.get("fancy", False):
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)

    def __trigger__(self):
        if self.options.get("shell", False):
            self.options.get("console", console).print(self)
        else:
            raise self from None

    def __replace__(self, /, **overrides):
        return type(self)(self.message, **(dict(self.options) | overrides))


class RegistryError(CommandException):
    """Descriptor set that cannot become a registry."""


class DuplicateAliasError(RegistryError):
    @property
    def alias(self):
        return self.options.get("alias")

    @property
    def names(self):
        return self.options.get("names", ())


class CoercionError(CommandException):
    @property
    def token(self):
        return self.options.get("token")

    @property
    def target(self):
        return self.options.get("target")


class DispatchError(CommandException):
    @property
    def input(self):
        return self.options.get("input")


class InvocationError(CommandException):
    @property
    def handler(self):
        return self.options.get("handler")

    @property
    def exception(self):
        return self.options.get("exception")


def trigger(fault, /, **options):
    """
    Merge *options* into a copy of *fault* and trigger it: raise it, or print
    it when ``shell=True``.
    """
    for method in ("__trigger__", "__replace__"):
        if not callable(getattr(fault, method, None)):
            raise TypeError(f"trigger() argument must define {method}()")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """Documentation registered for *code* in __main__.__docs__, or None."""
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a FaultCode")
    return _host("__docs__", {}).get(code)


__all__ = (
    "CommandException",
    "RegistryError",
    "DuplicateAliasError",
    "CoercionError",
    "DispatchError",
    "InvocationError",
    "FaultCode",
    "trigger",
    "getdoc",
)
