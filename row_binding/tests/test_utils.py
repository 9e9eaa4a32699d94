import gc
import weakref
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

import pytest

from ..types import (
    BindingField,
    DataKind,
    Float32,
    Int16,
    RowContext,
    UInt32,
)
from ..utils import analysis_dataclass


class Mode(Enum):
    a = 0
    b = 1


@dataclass
class AnalysedClass:
    must: int = BindingField('must')
    name: Optional[str] = BindingField('name', default='hello')
    small: Int16 = BindingField('index:2', default=Int16(0))
    big: UInt32 = BindingField('big', default=UInt32(0))
    ratio: Float32 = BindingField('ratio', default=Float32(0))
    mode: Mode = BindingField('mode', default=Mode.a)
    born: date = BindingField('born, format:%d.%m.%Y', default=None)
    amount: Decimal = field(default=Decimal(0), metadata={'csv': 'amount'})
    plain: str = ''
    skipped: str = BindingField('-', default='')


def test_analysis_dataclass():
    res = analysis_dataclass(AnalysedClass)

    assert [f.name for f in res] == [
        'must', 'name', 'small', 'big', 'ratio', 'mode', 'born', 'amount'
    ]
    kinds = {f.name: f.kind for f in res}
    assert kinds == {
        'must': DataKind.Int,
        'name': DataKind.String,
        'small': DataKind.Int,
        'big': DataKind.Uint,
        'ratio': DataKind.Float,
        'mode': DataKind.Enum,
        'born': DataKind.Temporal,
        'amount': DataKind.Text,
    }

    name = res[1]
    assert name.optional is True
    assert name.type is str
    assert name.type_name == 'Optional[str]'

    born = res[6]
    assert born.directive.column_name == 'born'
    assert born.directive.format == '%d.%m.%Y'


def test_analysis_is_cached():
    assert analysis_dataclass(AnalysedClass) is analysis_dataclass(AnalysedClass)


def test_analysis_requires_dataclass():
    with pytest.raises(TypeError):
        analysis_dataclass(int)


def test_sized_numbers():
    assert Int16.bounds() == (-32768, 32767)
    assert UInt32.bounds() == (0, 4294967295)
    assert Float32(1.5) == 1.5

    with pytest.raises(OverflowError):
        Float32(1e39)


def test_row_context_header_width():
    assert RowContext(columns=['a', 'b']).header_width == 2
    assert RowContext.from_header(['a', 'b', 'c']).header_width == 3
    assert RowContext.from_header(['a', 'b', 'c'], ['1']).columns == ['1']


def test_analysis_does_not_keep_classes_alive():

    @dataclass
    class Temporary:
        value: int = BindingField('value', default=0)

    bound = analysis_dataclass(Temporary)
    ref = weakref.ref(Temporary)

    del Temporary
    gc.collect()

    assert ref() is None
    assert [f.name for f in bound] == ['value']
