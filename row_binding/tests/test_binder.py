from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from ..binder import bind, bind_record, locate
from ..errors import (
    ConversionError,
    IndexOutOfRangeError,
    MalformedAnnotationError,
    UnknownColumnError,
)
from ..tag import parse_tag
from ..types import BindingField, RowContext
from ..utils import analysis_dataclass

HEADER = ['field1', 'field2', 'field3', 'field4']


@dataclass
class Person:
    name: str = BindingField('field1', default='')
    age: int = BindingField('field2', default=0)
    active: bool = BindingField('field3', default=False)
    balance: Optional[Decimal] = BindingField('field4', default=None)
    note: str = 'untouched'
    excluded: str = BindingField('-', default='excluded')


@dataclass
class ThreeFields:
    first: str = BindingField('field1', default='')
    second: int = BindingField('field2', default=0)
    third: int = BindingField('field3', default=0)


def test_locate_by_index():
    row = RowContext(columns=['a', 'b', 'c', 'd'])

    assert locate(parse_tag('index:2'), row) == 'c'


def test_locate_index_beyond_header_width():
    row = RowContext.from_header(HEADER, ['a', 'b', 'c', 'd', 'e', 'f'])

    with pytest.raises(IndexOutOfRangeError) as exc_info:
        locate(parse_tag('index:10'), row, 'field', 'index:10')
    assert exc_info.value.index == 10
    assert exc_info.value.width == 4
    assert exc_info.value.field_name == 'field'

    # the row is long enough but the header is not, this is still an error
    with pytest.raises(IndexOutOfRangeError):
        locate(parse_tag('index:5'), row)


def test_locate_index_beyond_short_row():
    row = RowContext.from_header(HEADER, ['a'])

    # within the header width, a short row gives an empty value
    assert locate(parse_tag('index:3'), row) == ''


def test_locate_by_name():
    row = RowContext.from_header(HEADER, ['a', 'b'])

    assert locate(parse_tag('field2'), row) == 'b'
    assert locate(parse_tag('field4'), row) == ''

    with pytest.raises(UnknownColumnError) as exc_info:
        locate(parse_tag('missing'), row)
    assert exc_info.value.column == 'missing'


def test_bind_in_place():
    row = RowContext.from_header(HEADER, ['hello', '42', 'true', '123.456'])
    person = Person(note='kept')

    result = bind(person, row)

    assert result is person
    assert person.name == 'hello'
    assert person.age == 42
    assert person.active is True
    assert person.balance == Decimal('123.456')
    assert person.note == 'kept'
    assert person.excluded == 'excluded'


def test_bind_empty_optional_decimal():
    row = RowContext.from_header(HEADER, ['hello', '42', 'true', ''])

    assert bind(Person(), row).balance is None


def test_excluded_fields_are_never_touched():

    @dataclass
    class Excluded:
        a: str = BindingField('-', default='a')
        b: str = BindingField('', default='b')
        c: str = 'c'

    row = RowContext.from_header(['a', 'b', 'c'], ['x', 'y', 'z'])

    assert bind(Excluded(), row) == Excluded()
    assert analysis_dataclass(Excluded) == ()


def test_partial_population_without_rollback():
    row = RowContext.from_header(HEADER, ['first', 'notanint', 'notanint'])
    record = ThreeFields(third=7)

    with pytest.raises(ConversionError) as exc_info:
        bind(record, row)

    err = exc_info.value
    assert err.field_name == 'second'
    assert err.tag == 'field2'
    assert err.type_name == 'int'
    assert 'second' in str(err) and 'field2' in str(err)
    # the first field stays populated, the third is never attempted
    assert record.first == 'first'
    assert record.second == 0
    assert record.third == 7


def test_errors_carry_field_context():

    @dataclass
    class Unknown:
        value: int = BindingField('nope', default=0)

    row = RowContext.from_header(HEADER, ['a'])
    with pytest.raises(UnknownColumnError) as exc_info:
        bind(Unknown(), row)

    assert exc_info.value.field_name == 'value'
    assert exc_info.value.tag == 'nope'
    assert 'invalid column "nope"' in str(exc_info.value)


def test_malformed_annotation_on_bind():

    @dataclass
    class Malformed:
        value: int = BindingField('index:x', default=0)

    with pytest.raises(MalformedAnnotationError) as exc_info:
        bind(Malformed(), RowContext(columns=['1']))

    assert exc_info.value.field_name == 'value'


def test_bind_record_by_index():

    @dataclass(frozen=True)
    class Event:
        name: str = BindingField('index:0')
        day: date = BindingField('index:1,format:%Y-%m-%d')
        count: int = BindingField('index:2', default=0)
        label: str = 'event'

    row = RowContext(columns=['launch', '2023-12-04', '3'])
    event = bind_record(Event, row)

    assert event == Event(name='launch', day=date(2023, 12, 4), count=3)


def test_bind_record_failure_creates_nothing():
    row = RowContext.from_header(HEADER, ['first', 'notanint', '1'])

    with pytest.raises(ConversionError):
        bind_record(ThreeFields, row)


def test_bind_requires_a_dataclass_instance():
    row = RowContext(columns=['a'])

    with pytest.raises(TypeError):
        bind(ThreeFields, row)
    with pytest.raises(TypeError):
        bind(object(), row)
    with pytest.raises(TypeError):
        bind_record(dict, row)


def test_warnings_on_ignored_options():

    @dataclass
    class Ambiguous:
        value: str = BindingField('field1,index:3', default='')
        hidden: str = field(
            default='', init=False, metadata={'csv': 'field2'}
        )

    with pytest.warns(UserWarning) as record:
        bound = analysis_dataclass(Ambiguous)

    assert [f.name for f in bound] == ['value']
    assert len(record) == 2

    row = RowContext.from_header(HEADER, ['a', 'b', 'c', 'd'])
    assert bind(Ambiguous(), row).value == 'a'


def test_bind_rejects_frozen_instances():

    @dataclass(frozen=True)
    class Frozen:
        name: str = BindingField('field1', default='')

    row = RowContext.from_header(HEADER, ['a'])

    with pytest.raises(TypeError) as exc_info:
        bind(Frozen(), row)
    assert 'bind_record' in str(exc_info.value)

    assert bind_record(Frozen, row) == Frozen('a')
