"""
Token coercion: turn one text token into a typed value.

Overview
- coerce(token, target, nullable=False): convert a token for a parameter of type
  `target`. Conversions are locale-invariant and side-effect free.
- unwrap(annotation): split a nullable wrapper (T | None, Optional[T]) into
  (T, True); plain types come back as (T, False).
- converters: the built-in table of strict converters keyed by exact type.

Failure contract
- Any conversion failure raises CoercionError carrying the offending token and the
  target type. Converter exceptions never escape raw.
- When `nullable` is true, a failed conversion yields None instead.

Supported targets
- str (identity), int, float, bool, complex, decimal.Decimal,
  datetime.date / datetime.datetime / datetime.time (ISO 8601),
  enum.Enum subclasses (member name, then member value),
- untyped markers (inspect.Parameter.empty, typing.Any, object): the raw token,
- any other callable is used as a one-argument converter.
"""
import datetime
import decimal
import enum
import inspect
import re
import types
import typing

from .faults import CoercionError, FaultCode, getdoc

# ASCII digits only: tokens are parsed the same regardless of host locale.
_INTEGER = re.compile(r"[+-]?[0-9]+")
_REAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_SPECIALS = {"nan", "+nan", "-nan", "inf", "+inf", "-inf", "infinity", "+infinity", "-infinity"}


def _integer(token):
    if not _INTEGER.fullmatch(token):
        raise ValueError("invalid literal for int: %r" % token)
    return int(token)


def _real(token):
    if not _REAL.fullmatch(token) and token.lower() not in _SPECIALS:
        raise ValueError("invalid literal for float: %r" % token)
    return float(token)


def _decimal(token):
    if not _REAL.fullmatch(token) and token.lower() not in _SPECIALS:
        raise ValueError("invalid literal for Decimal: %r" % token)
    return decimal.Decimal(token)


def _boolean(token):
    match token.lower():
        case "true":
            return True
        case "false":
            return False
    raise ValueError("invalid literal for bool: %r" % token)


def _complex(token):
    if "_" in token:
        raise ValueError("invalid literal for complex: %r" % token)
    return complex(token)


def _enumeration(target, token):
    try:
        return target[token]
    except KeyError:
        pass
    for member in target:
        if str(member.value) == token:
            return member
    raise ValueError("%r is not a valid %s" % (token, target.__name__))


converters = types.MappingProxyType({
    str: str,
    int: _integer,
    float: _real,
    bool: _boolean,
    complex: _complex,
    decimal.Decimal: _decimal,
    datetime.date: datetime.date.fromisoformat,
    datetime.datetime: datetime.datetime.fromisoformat,
    datetime.time: datetime.time.fromisoformat,
})

_UNTYPED = (inspect.Parameter.empty, typing.Any, object)


def unwrap(annotation, /):
    """
    Split a nullable annotation into (underlying, nullable).

    - int | None, Optional[int], Union[int, None] -> (int, True)
    - int                                         -> (int, False)
    - None alone is not a usable target and is rejected with TypeError.

    Unions of several non-None members are kept as-is (the converter for such a
    target is the union itself, which will not be callable and fails at coercion).
    """
    if annotation is None or annotation is type(None):
        raise TypeError("unwrap() argument must not be None")
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        members = [member for member in typing.get_args(annotation) if member is not type(None)]
        nullable = len(members) != len(typing.get_args(annotation))
        if len(members) == 1:
            return members[0], nullable
        return annotation, nullable
    return annotation, False


def coerce(token, target, nullable=False, /):
    """
    Convert `token` into a value of `target`.

    Parameters
    - token: str, a single whitespace-free token from the command line.
    - target: type tag (see module docstring); nullable wrappers are unwrapped.
    - nullable: bool, when true, failures produce None instead of CoercionError.
      A nullable wrapper target (T | None) implies nullable.

    Returns
    - The converted value, or None for a failed nullable conversion.

    Raises
    - TypeError: token is not a string.
    - CoercionError: conversion failed and the parameter is not nullable.
    """
    if not isinstance(token, str):
        raise TypeError("coerce() first argument must be a string")

    target, wrapped = unwrap(target)
    nullable = bool(nullable) or wrapped

    if target in _UNTYPED:
        return token

    try:
        if isinstance(target, type) and issubclass(target, enum.Enum):
            return _enumeration(target, token)
        try:
            converter = converters[target]
        except (KeyError, TypeError):
            converter = target
        if not callable(converter):
            raise TypeError("%r is not a converter" % (converter,))
        return converter(token)
    except Exception as exception:
        if nullable:
            return None
        typename = getattr(target, "__name__", repr(target))
        raise CoercionError(
            "token %r cannot be converted to %s" % (token, typename),
            title="conversion error",
            code=FaultCode.UNCASTABLE_TOKEN,
            token=token,
            target=target,
            hint="use a valid %s" % typename,
            docs=getdoc(FaultCode.UNCASTABLE_TOKEN),
            exception=exception,
        ) from exception


__all__ = (
    "coerce",
    "unwrap",
    "converters",
)
