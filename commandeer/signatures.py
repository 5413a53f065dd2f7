"""
Handler signatures: parameter specs, arity counts and positional binding.

Overview
- ParameterSpec: one positional parameter (type, nullable, default, variadic).
- Signature: an ordered sequence of ParameterSpec with memoized arity counts
  (required/optional/total), arity classification and token binding.
- Arity: the arity class a token count satisfies, in priority order.
- PARAMS: optional-count sentinel for signatures ending in a variadic parameter.

Arity classes (first satisfied wins)
1. EXACT     : count == total, or the signature is variadic.
2. BOUNDARY  : count == required, or count == optional.
3. PARTIAL   : required < count < total.
A token list shorter than the required count never matches any class.

Binding
- Tokens are walked positionally against the specs; tokens past the last
  positional parameter are coerced against the variadic parameter.
- The walk stops at the first token whose coercion fails on a non-nullable
  parameter (CoercionError propagates); nullable parameters take None instead.
- Defaults are not auto-filled: the bound list has exactly one value per token.
"""
import functools
import inspect
from enum import IntEnum

from .coercion import coerce, unwrap
from .utils import Unset, view

PARAMS = 1000


class Arity(IntEnum):
    EXACT = 1
    BOUNDARY = 2
    PARTIAL = 3


class ParameterSpec:
    """
    One positional parameter of a handler signature.

    Invariants
    - a variadic parameter has no default.
    - `default` is only meaningful when `has_default` is true.
    - equal specs share type, nullability, default and variadic flag.
    """
    __slots__ = ("_type", "_nullable", "_has_default", "_default", "_variadic")

    type = view("type")
    nullable = view("nullable")
    has_default = view("has_default")
    default = view("default")
    variadic = view("variadic")

    def __init__(self, type=str, /, nullable=False, default=Unset, *, variadic=False):
        if not isinstance(nullable, bool):
            raise TypeError("parameter-spec 'nullable' must be a boolean")
        if not isinstance(variadic, bool):
            raise TypeError("parameter-spec 'variadic' must be a boolean")
        if variadic and default is not Unset:
            raise ValueError("parameter-spec cannot be variadic and have a default")

        type, wrapped = unwrap(type)

        self._type = type
        self._nullable = nullable or wrapped
        self._has_default = default is not Unset
        self._default = default if default is not Unset else None
        self._variadic = variadic

    def __rich_repr__(self):
        yield "type", self._type
        yield "nullable", self._nullable, False
        if self._has_default:
            yield "default", self._default
        yield "variadic", self._variadic, False

    def __repr__(self):
        return "parameter-spec(%s)" % ", ".join(
            "%s=%r" % (field[0], field[1]) for field in self.__rich_repr__()
        )

    def __eq__(self, other):
        if not isinstance(other, ParameterSpec):
            return NotImplemented
        return self._key() == other._key() and self._default == other._default

    def __hash__(self):
        # default left out: it may be unhashable
        return hash(self._key())

    def _key(self):
        return self._type, self._nullable, self._has_default, self._variadic

    def coerce(self, token, /):
        return coerce(token, self._type, self._nullable)


class Signature:
    """
    Ordered positional parameters of one overload.

    Construction enforces ordering: required parameters come first, then
    parameters with defaults, then at most one trailing variadic parameter.
    """

    parameters = view("parameters")

    def __init__(self, parameters=(), /):
        parameters = tuple(parameters)
        stage = 0  # 0: required, 1: optional, 2: variadic
        for index, parameter in enumerate(parameters):
            if not isinstance(parameter, ParameterSpec):
                raise TypeError("signature parameters must be parameter-specs")
            if stage == 2:
                raise ValueError("signature variadic parameter must be the last one")
            if parameter.variadic:
                stage = 2
            elif parameter.has_default:
                stage = 1
            elif stage == 1:
                raise ValueError(
                    "signature required parameter at position %d follows a parameter with a default" % index
                )
        self._parameters = parameters

    @classmethod
    def from_callable(cls, callback, /):
        """
        Derive a signature from a Python callable.

        - annotation → type (missing annotation means the raw token is passed)
        - default    → has_default/default
        - *args      → variadic
        - keyword-only parameters with defaults and **kwargs are ignored (never
          bound positionally); keyword-only parameters without defaults make the
          callable unusable from a command line and raise TypeError.
        """
        try:
            signature = inspect.signature(callback, eval_str=True)
        except TypeError:
            raise TypeError("signature 'callback' must be callable") from None
        except ValueError:
            raise ValueError("signature 'callback' must be an inspectable callable") from None

        parameters = []
        for parameter in signature.parameters.values():
            match parameter.kind:
                case inspect.Parameter.POSITIONAL_ONLY | inspect.Parameter.POSITIONAL_OR_KEYWORD:
                    parameters.append(ParameterSpec(
                        parameter.annotation,
                        default=parameter.default if parameter.default is not parameter.empty else Unset,
                    ))
                case inspect.Parameter.VAR_POSITIONAL:
                    parameters.append(ParameterSpec(parameter.annotation, variadic=True))
                case inspect.Parameter.KEYWORD_ONLY if parameter.default is parameter.empty:
                    raise TypeError(
                        "signature keyword-only parameter %r must have a default" % parameter.name
                    )
        return cls(parameters)

    @functools.cached_property
    def required(self):
        return sum(1 for parameter in self._parameters if not (parameter.has_default or parameter.variadic))

    @functools.cached_property
    def optional(self):
        count = 0
        for parameter in self._parameters:
            if parameter.variadic:
                return PARAMS
            count += parameter.has_default
        return count

    @functools.cached_property
    def total(self):
        return min(self.required + self.optional, PARAMS)

    @property
    def variadic(self):
        return self.optional >= PARAMS

    def arity(self, count, /):
        """
        Return the Arity class satisfied by `count` tokens, or None.
        """
        # too few tokens never match, even when count equals the optional count
        if count < self.required:
            return None
        if count == self.total or self.variadic:
            return Arity.EXACT
        if count == self.required or count == self.optional:
            return Arity.BOUNDARY
        if self.required < count < self.total:
            return Arity.PARTIAL
        return None

    def matches(self, count, /):
        return self.arity(count) is not None

    def bind(self, tokens, /):
        """
        Coerce `tokens` positionally against the parameters.

        Returns the list of converted values (one per token).
        Raises CoercionError at the first token that cannot be converted for a
        non-nullable parameter.
        """
        tokens = list(tokens)
        if len(tokens) > len(self._parameters) and not self.variadic:
            raise ValueError("signature takes at most %d tokens but %d were given" % (
                len(self._parameters), len(tokens)
            ))
        values = []
        for index, token in enumerate(tokens):
            parameter = self._parameters[min(index, len(self._parameters) - 1)]
            values.append(parameter.coerce(token))
        return values

    def __len__(self):
        return len(self._parameters)

    def __iter__(self):
        return iter(self._parameters)

    def __eq__(self, other):
        if not isinstance(other, Signature):
            return NotImplemented
        return self._parameters == other._parameters

    def __hash__(self):
        return hash(self._parameters)

    def __rich_repr__(self):
        yield from self._parameters

    def __repr__(self):
        return "signature(%s)" % ", ".join(map(repr, self._parameters))


__all__ = (
    "PARAMS",
    "Arity",
    "ParameterSpec",
    "Signature",
)
