"""
Dispatcher: map a command line onto a registered overload and invoke it.

Flow
1. tokenize(input): literal single-space split; the first token is the command
   key, the remainder are argument tokens. No quoting or escaping.
2. look the key up in the Registry; a miss means "not handled" (False).
3. walk the entry's overloads in registration order; the first overload whose
   arity class matches and whose tokens all bind is selected. Declaration order
   is the only tie-break: an earlier, more generic overload shadows a later,
   more specific one.
4. hand (handler, args) to the invocation collaborator exactly once.

Outcomes
- True: a handler was found and invoked.
- False: unknown command, or no overload accepted the tokens. Both look the same
  to the caller.
- DispatchError: the input cannot be tokenized meaningfully (blank or multi-line).
- anything the invocation collaborator raises is forwarded unchanged.

Runtime flags
- shell: render faults on the console instead of raising them (debug consoles).
- fancy / colorful: rendering chrome for shell mode.
"""
import logging

from .faults import CoercionError, DispatchError, InvocationError, CommandException, FaultCode, getdoc, trigger
from .registry import Registry
from .utils import ordinal

logger = logging.getLogger(__name__)


def tokenize(input, /):
    """
    Split a command line into (key, tokens).

    Raises
    - TypeError: input is not a string.
    - DispatchError: input is blank or spans several lines.
    """
    if not isinstance(input, str):
        raise TypeError("tokenize() argument must be a string")
    if "\n" in input or "\r" in input:
        raise DispatchError(
            "command line cannot span several lines",
            title="multi-line input",
            code=FaultCode.MULTILINE_INPUT,
            input=input,
            hint="send one command per line",
            docs=getdoc(FaultCode.MULTILINE_INPUT),
        )
    if not input.strip():
        raise DispatchError(
            "command line is empty",
            title="empty input",
            code=FaultCode.EMPTY_INPUT,
            input=input,
            hint="type a command name followed by its arguments",
            docs=getdoc(FaultCode.EMPTY_INPUT),
        )
    key, *tokens = input.split(" ")
    return key, tokens


def call(handler, args, /):
    """
    Default invocation collaborator: call `handler(*args)`.

    Exceptions raised by the handler are wrapped into InvocationError (the
    original is kept as `exception` and as __cause__).
    """
    try:
        handler(*args)
    except Exception as exception:
        raise InvocationError(
            "handler %s raised %s" % (
                getattr(handler, "__qualname__", repr(handler)), type(exception).__name__
            ),
            title="delegated error",
            code=FaultCode.DELEGATED_ERROR,
            handler=handler,
            exception=exception,
            hint="check additional logs for more details",
            docs=getdoc(FaultCode.DELEGATED_ERROR),
        ) from exception


class Dispatcher:
    """
    Resolve command lines against a Registry and invoke the selected handler.

    Parameters
    - registry: Registry built by registry.build().
    - invoker: callable(handler, args) performing the actual call (defaults to call()).
    - shell, fancy, colorful: runtime flags (keyword-only).

    The dispatcher keeps no per-call state; concurrent invoke() calls are safe
    as long as the handlers themselves are.
    """

    def __init__(self, registry, /, invoker=call, *, shell=False, fancy=False, colorful=True):
        if not isinstance(registry, Registry):
            raise TypeError("dispatcher 'registry' must be a registry")
        if not callable(invoker):
            raise TypeError("dispatcher 'invoker' must be callable")
        self._registry = registry
        self._invoker = invoker
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)

    @property
    def registry(self):
        return self._registry

    def resolve(self, input, /):
        """
        Select the overload for a command line without invoking it.

        Returns
        - (entry, overload, args) for the first overload that matches, or
        - None when the key is unknown or no overload accepts the tokens.

        Raises
        - DispatchError from tokenize().
        """
        key, tokens = tokenize(input)

        try:
            entry = self._registry[key]
        except KeyError:
            logger.debug("no command registered under %r", key)
            return None

        for position, overload in enumerate(entry.overloads, start=1):
            arity = overload.signature.arity(len(tokens))
            if arity is None:
                continue
            try:
                args = overload.signature.bind(tokens)
            except CoercionError as fault:
                logger.debug("%s overload of %r rejected: %s", ordinal(position), entry.name, fault)
                continue
            logger.debug("%s overload of %r selected (%s)", ordinal(position), entry.name, arity.name.lower())
            return entry, overload, args

        logger.debug("no overload of %r accepts %d token(s)", entry.name, len(tokens))
        return None

    def invoke(self, input, /):
        """
        Resolve and invoke a command line.

        Returns True when a handler was invoked, False otherwise. In shell mode,
        faults are printed and the call returns False for dispatch faults and
        True for invocation faults (the handler did run).
        """
        try:
            resolved = self.resolve(input)
        except DispatchError as fault:
            self.trigger(fault)
            return False

        if resolved is None:
            return False

        entry, overload, args = resolved
        logger.debug("invoking %r with %r", entry.name, args)
        try:
            self._invoker(overload.handler, args)
        except CommandException as fault:
            if not self.shell:
                raise
            self.trigger(fault)
        return True

    def trigger(self, fault, /):
        """
        Surface a fault with this dispatcher's runtime flags.

        Outside shell mode the fault is raised as-is.
        """
        if not self.shell:
            raise fault
        trigger(fault, shell=True, fancy=self.fancy, colorful=self.colorful)

    def __repr__(self):
        return "dispatcher(commands=%d, shell=%r)" % (len(self._registry.entries), self.shell)


__all__ = (
    "Dispatcher",
    "tokenize",
    "call",
)
