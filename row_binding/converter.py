'''
convert the raw value of a column to the declared type of a field.
'''
import math
import re
import types
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    NamedTuple,
    Optional,
    Tuple,
    Type,
    Union,
    get_args,
    get_origin,
)
from uuid import UUID

from .errors import ConversionError, UnsupportedTypeError
from .types import DataKind, TextDecodable, _SizedInt

_SIGNED_PATTERN = re.compile(r'[+-]?[0-9]+')
_UNSIGNED_PATTERN = re.compile(r'[0-9]+')
_INFINITY_PATTERN = re.compile(r'[+-]?inf(inity)?', re.IGNORECASE)

BOOL_TRUE = ('1', 't', 'true')
BOOL_FALSE = ('0', 'f', 'false')


class Decoder(NamedTuple):
    decode: Callable[[str], Any]
    zero: Callable[[], Any]


_DECODERS: Dict[type, Decoder] = {}


def register_decoder(
    dtype: type,
    decoder: Callable[[str], Any],
    zero: Optional[Callable[[], Any]] = None
) -> None:
    '''
        Register a function to decode a type from text.

        Use this for the types you cannot add a `from_text` classmethod to.

        Parameters:
        - dtype (`type`): the type of the fields to decode.
        - decoder (`Callable[[str], Any]`): builds a value from the stripped text.
        - zero (`Optional[Callable[[], Any]]`, optional):
            builds the value of an empty column for a non-optional field,
            `dtype()` if not provided.

        Example:
        ```python
        from ipaddress import IPv4Address

        register_decoder(IPv4Address, IPv4Address, zero=lambda: IPv4Address(0))
        ```
    '''
    _DECODERS[dtype] = Decoder(decoder, zero if zero is not None else dtype)


def unregister_decoder(dtype: type) -> None:
    _DECODERS.pop(dtype, None)


def find_decoder(dtype: Any) -> Optional[Decoder]:
    '''
        Find how to decode a type from text: a registered decoder first, then the
        `from_text` classmethod of the `TextDecodable` protocol.
    '''
    if not isinstance(dtype, type):
        return None
    if dtype in _DECODERS:
        return _DECODERS[dtype]
    if isinstance(dtype, TextDecodable):
        return Decoder(dtype.from_text, dtype)
    return None


register_decoder(Decimal, Decimal)
register_decoder(UUID, UUID, zero=lambda: UUID(int=0))


def type_name(dtype: Any) -> str:
    return getattr(dtype, '__name__', None) or str(dtype)


def _kind_of(dtype: Any) -> DataKind:
    if not isinstance(dtype, type):
        return DataKind.Unknown
    if issubclass(dtype, bool):
        return DataKind.Bool
    if issubclass(dtype, Enum):
        return DataKind.Enum
    if issubclass(dtype, _SizedInt) and not dtype.signed:
        return DataKind.Uint
    if issubclass(dtype, int):
        return DataKind.Int
    if issubclass(dtype, float):
        return DataKind.Float
    if issubclass(dtype, complex):
        return DataKind.Complex
    if issubclass(dtype, str):
        return DataKind.String
    if issubclass(dtype, (datetime, date, time)) and find_decoder(dtype) is None:
        return DataKind.Temporal
    if find_decoder(dtype) is not None:
        return DataKind.Text
    return DataKind.Unknown


def analysis_type(dtype: Any) -> Tuple[Any, DataKind, bool]:
    '''
        Resolve the conversion kind of a type hint.

        `Optional[X]` (or `X | None`) is unwrapped to `X`; any other union has
        no conversion.

        Returns:
        - `Tuple[Any, DataKind, bool]`:
            the unwrapped type, its kind and whether it was optional.
    '''
    origin_type = get_origin(dtype)
    if origin_type is Union or (
        hasattr(types, 'UnionType') and origin_type is types.UnionType
    ):
        dtype_generics = [t for t in get_args(dtype) if t is not type(None)]
        if len(dtype_generics) != 1:
            return dtype, DataKind.Unknown, False
        return dtype_generics[0], _kind_of(dtype_generics[0]), True

    return dtype, _kind_of(dtype), False


def bool_type_fn(val: str, dtype: Type = bool) -> bool:
    '''
        Convert a string to a boolean.

        Accepted values, case-insensitive: `1`, `t`, `true` and `0`, `f`,
        `false`.

        Raises:
        - `ValueError`: for any other value.
    '''
    lowered = val.lower()
    if lowered in BOOL_TRUE:
        return True
    if lowered in BOOL_FALSE:
        return False
    raise ValueError(f'invalid syntax for a boolean: "{val}"')


def enum_type_fn(val: str, enum_type: Type[Enum]) -> Enum:
    '''
        Convert a string to an enum member.

        The string is first compared with the member values, after conversion to
        the type of each value, then with the member names.

        Raises:
        - `ValueError`:
            If no matching enum member is found for the provided string.
    '''
    for item in enum_type:
        try:
            if type(item.value)(val) == item.value:
                return item
        except Exception:
            # not coercible to the type of this value
            continue
    if val in enum_type.__members__:
        return enum_type[val]

    raise ValueError(f'No matching enum value found for the string: {val}')


def int_type_fn(val: str, dtype: Type[int] = int) -> int:
    '''
        Convert a base-10 string to a (sized) integer.

        Raises:
        - `ValueError`: if the string is not an integer literal.
        - `OverflowError`: if the value does not fit into the bit width.
    '''
    signed = not (issubclass(dtype, _SizedInt) and not dtype.signed)
    pattern = _SIGNED_PATTERN if signed else _UNSIGNED_PATTERN
    if not pattern.fullmatch(val):
        raise ValueError(f'invalid syntax for an integer: "{val}"')

    result = int(val)
    if issubclass(dtype, _SizedInt):
        lower, upper = dtype.bounds()
        if not lower <= result <= upper:
            raise OverflowError(
                f'value out of range [{lower}, {upper}] of {type_name(dtype)}'
            )
    return dtype(result)


def _check_literal(val: str) -> None:
    if not val or not val.isascii() or val != val.strip() or '_' in val:
        raise ValueError(f'invalid syntax for a number: "{val}"')


def _check_overflow(result: float, literal: str) -> None:
    if math.isinf(result) and not _INFINITY_PATTERN.search(literal):
        raise OverflowError(f'value out of range: "{literal}"')


def float_type_fn(val: str, dtype: Type[float] = float) -> float:
    '''
        Convert a string to a float, `Float32` is rounded to single precision.

        Raises:
        - `ValueError`: if the string is not a float literal.
        - `OverflowError`:
            if the value is out of the range of the bit width.
    '''
    _check_literal(val)
    result = float(val)
    _check_overflow(result, val)
    return dtype(result)


def complex_type_fn(val: str, dtype: Type[complex] = complex) -> complex:
    '''
        Convert a string like `1+2i`, `1+2j` or `(1+2i)` to a complex number.
    '''
    literal = val
    if literal.startswith('(') and literal.endswith(')'):
        literal = literal[1:-1]
    _check_literal(literal)
    if literal[-1] in 'iI':
        literal = literal[:-1] + 'j'

    result = complex(literal)
    _check_overflow(result.real, literal)
    _check_overflow(result.imag, literal)
    return dtype(result)


def str_type_fn(val: str, dtype: Type[str] = str) -> str:
    if dtype is str:
        return val
    return dtype(val)


_TYPE_FNS: Dict[DataKind, Callable[[str, Any], Any]] = {
    DataKind.Bool: bool_type_fn,
    DataKind.Enum: enum_type_fn,
    DataKind.Int: int_type_fn,
    DataKind.Uint: int_type_fn,
    DataKind.Float: float_type_fn,
    DataKind.Complex: complex_type_fn,
    DataKind.String: str_type_fn,
}


def temporal_type_fn(val: str, dtype: type, format: str) -> Any:
    '''
        Parse a date, a time or a datetime with a `strptime` pattern.

        Raises:
        - `ValueError`: if the pattern is empty or does not match.
    '''
    if not format:
        raise ValueError('empty format pattern, set it with "format:<pattern>"')
    if issubclass(dtype, datetime):
        return dtype.strptime(val, format)

    parsed = datetime.strptime(val, format)
    if issubclass(dtype, date):
        return parsed.date()
    return parsed.timetz()


def text_type_fn(val: str, dtype: type, decoder: Decoder) -> Any:
    if val == '':
        return decoder.zero()
    return decoder.decode(val.strip())


def convert_kind(
    value: str,
    dtype: Any,
    kind: DataKind,
    optional: bool = False,
    format: str = '',
    field_name: str = ''
) -> Any:
    '''
        Convert a raw value with an already resolved kind, see `convert`.
    '''
    if optional and value == '':
        return None

    target = type_name(dtype)
    if kind is DataKind.Text or kind is DataKind.Unknown:
        # decoders may be registered after the field was analysed
        decoder = find_decoder(dtype)
        if decoder is None:
            raise UnsupportedTypeError(target)
        type_fn = lambda val, dtype: text_type_fn(val, dtype, decoder)
    elif kind is DataKind.Temporal:
        type_fn = lambda val, dtype: temporal_type_fn(val, dtype, format)
    else:
        type_fn = _TYPE_FNS[kind]

    try:
        return type_fn(value, dtype)
    except Exception as e:
        raise ConversionError(
            value, target, field_name=field_name, cause=e
        ) from e


def convert(
    value: str, field_type: Any, format: str = '', field_name: str = ''
) -> Any:
    '''
        Convert the raw value of a column to a type.

        Supported types, in the order they are tried:
        - `Optional[X]`: None for an empty value, X otherwise.
        - `bool`, `Enum` subclasses.
        - `int`, `Int8` ... `Int64`, `UInt`, `UInt8` ... `UInt64`.
        - `float`, `Float32`, `Float64`, `complex`, `Complex64`, `Complex128`.
        - `str`.
        - `datetime`, `date` and `time`, parsed with the `format` pattern.
        - types with a `from_text` classmethod or a registered decoder.

        Parameters:
        - value (`str`): the raw value.
        - field_type (`Any`): the type hint of the field.
        - format (`str`, optional): the `strptime` pattern of temporal types.
        - field_name (`str`, optional): the field name, for error messages.

        Raises:
        - `ConversionError`: if the value cannot be converted.
        - `UnsupportedTypeError`: if no conversion is known for the type.
    '''
    dtype, kind, optional = analysis_type(field_type)
    return convert_kind(
        value,
        dtype,
        kind,
        optional=optional,
        format=format,
        field_name=field_name
    )
