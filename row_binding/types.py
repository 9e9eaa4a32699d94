'''
defined the data classes to bind a row to a dataclass.
'''
import struct
from dataclasses import MISSING, dataclass, field
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    TypeVar,
    runtime_checkable,
)

DataclassType = TypeVar('DataclassType')

TAG_KEY = 'csv'
SKIP_TAG = '-'
UNSET_INDEX = -1


class DataKind(Enum):
    '''
        Enum representing the conversion kinds of dataclass fields.

        The kind is resolved once per field from its type hint and decides which
        conversion is applied to the raw column value.

        Kinds:
        - Bool: `bool`.
        - Enum: `Enum` subclasses, matched by value or by name.
        - Int: signed integers, optionally sized (`Int8` ... `Int64`).
        - Uint: unsigned integers (`UInt`, `UInt8` ... `UInt64`).
        - Float: `float`, `Float32`, `Float64`.
        - Complex: `complex`, `Complex64`, `Complex128`.
        - String: `str`, used verbatim.
        - Temporal: `datetime`, `date` and `time`, parsed with the field format.
        - Text: types decoded from text, see `TextDecodable` and
          `register_decoder`.
        - Unknown: no conversion is available.
    '''
    Bool = 'bool'
    Enum = 'enum'
    Int = 'int'
    Uint = 'uint'
    Float = 'float'
    Complex = 'complex'
    String = 'string'
    Temporal = 'temporal'
    Text = 'text'
    Unknown = 'unknown'


class _SizedInt(int):
    bits = 0
    signed = True

    @classmethod
    def bounds(cls):
        if cls.signed:
            return -(1 << (cls.bits - 1)), (1 << (cls.bits - 1)) - 1
        return 0, (1 << cls.bits) - 1


class Int8(_SizedInt):
    bits = 8


class Int16(_SizedInt):
    bits = 16


class Int32(_SizedInt):
    bits = 32


class Int64(_SizedInt):
    bits = 64


class UInt8(_SizedInt):
    bits = 8
    signed = False


class UInt16(_SizedInt):
    bits = 16
    signed = False


class UInt32(_SizedInt):
    bits = 32
    signed = False


class UInt64(_SizedInt):
    bits = 64
    signed = False


UInt = UInt64


def _round_single(value: float) -> float:
    # raises OverflowError when the value does not fit into single precision
    return struct.unpack('f', struct.pack('f', value))[0]


class Float32(float):
    bits = 32

    def __new__(cls, value=0.0):
        return super(Float32, cls).__new__(cls, _round_single(float(value)))


class Float64(float):
    bits = 64


class Complex64(complex):
    bits = 64

    def __new__(cls, real=0.0, imag=0.0):
        value = complex(real, imag)
        return super(Complex64, cls).__new__(
            cls, _round_single(value.real), _round_single(value.imag)
        )


class Complex128(complex):
    bits = 128


@runtime_checkable
class TextDecodable(Protocol):
    '''
        A type that can be built from a text value.

        Example:
        ```python
        class Money:
            def __init__(self, cents: int = 0):
                self.cents = cents

            @classmethod
            def from_text(cls, text: str) -> 'Money':
                return cls(round(float(text) * 100))
        ```
    '''

    @classmethod
    def from_text(cls, text: str) -> Any:
        ...


@dataclass(frozen=True)
class BindingDirective:
    '''
        The parsed binding directive of a dataclass field.

        Attributes:
        - column_name (`str`): bind by header name when not empty.
        - column_index (`int`): bind by position when not negative and no name
          is given.
        - format (`str`): the `strptime` pattern for temporal fields.
    '''
    column_name: str = ''
    column_index: int = UNSET_INDEX
    format: str = ''

    @property
    def mode(self) -> str:
        if self.column_name:
            return 'name'
        if self.column_index >= 0:
            return 'index'
        return 'none'


@dataclass
class RowContext:
    '''
        The values of the current row and the active header mapping.

        Attributes:
        - columns (`Sequence[str]`): the raw values of the row.
        - column_index (`Mapping[str, int]`): header name to position.
    '''
    columns: Sequence[str] = field(default_factory=list)
    column_index: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def from_header(
        cls,
        header: Sequence[str],
        columns: Optional[Sequence[str]] = None
    ) -> 'RowContext':
        return cls(
            columns=list(columns) if columns is not None else [],
            column_index=index_header(header)
        )

    @property
    def header_width(self) -> int:
        if not self.column_index:
            return len(self.columns)
        return max(self.column_index.values()) + 1


def index_header(header: Sequence[str]) -> Dict[str, int]:
    return {name: i for i, name in enumerate(header)}


@dataclass
class BoundField:
    '''
        The analysis result of one annotated dataclass field.

        Attributes:
        - name (`str`): the field name.
        - tag (`str`): the raw binding directive.
        - directive (`BindingDirective`): the parsed directive.
        - type (`Any`): the declared type, `Optional` unwrapped.
        - kind (`DataKind`): the conversion kind of `type`.
        - optional (`bool`): whether the declared type is `Optional[type]`.
    '''
    name: str
    tag: str
    directive: BindingDirective
    type: Any
    kind: DataKind = DataKind.Unknown
    optional: bool = False

    @property
    def type_name(self) -> str:
        name = getattr(self.type, '__name__', None) or str(self.type)
        if self.optional:
            return f'Optional[{name}]'
        return name


def BindingField(
    tag: str,
    default: Optional[Any] = MISSING,
    default_factory: Optional[Callable] = MISSING,
):
    '''
        Create a dataclass field bound to a column.

        Parameters:
        - tag (`str`):
            The binding directive, e.g. `'birthday,format:%Y-%m-%d'`,
            `'index:2'` or `'-'` to exclude the field.
        - default (`Optional[Any]`, optional):
            Default value for the field. Defaults to MISSING.
        - default_factory (`Optional[Callable]`, optional):
            Default factory for the field. Defaults to MISSING.

        Returns:
        - `dataclasses.Field`:
            A dataclass field carrying the directive in its metadata.
    '''
    meta_info = {TAG_KEY: tag}

    if default is not MISSING:
        return field(default=default, metadata=meta_info)
    elif default_factory is not MISSING:
        return field(default_factory=default_factory, metadata=meta_info)
    return field(metadata=meta_info)
