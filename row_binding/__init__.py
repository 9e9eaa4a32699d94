'''
Bind the rows of a delimited text to dataclasses with per-field directives.
'''
from .binder import bind, bind_record, locate
from .converter import convert, register_decoder, unregister_decoder
from .errors import (
    BindingError,
    ConversionError,
    HeaderError,
    IndexOutOfRangeError,
    MalformedAnnotationError,
    UnknownColumnError,
    UnsupportedTypeError,
)
from .reader import RecordReader, read_records
from .tag import parse_tag
from .types import (
    BindingDirective,
    BindingField,
    Complex64,
    Complex128,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    RowContext,
    TextDecodable,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

Field = BindingField
