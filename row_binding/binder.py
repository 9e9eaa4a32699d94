'''
bind the values of a row to the fields of a dataclass.
'''
from dataclasses import is_dataclass
from typing import Any, Dict, Type

from .converter import convert_kind
from .errors import BindingError, IndexOutOfRangeError, UnknownColumnError
from .types import BindingDirective, BoundField, DataclassType, RowContext
from .utils import analysis_dataclass


def locate(
    directive: BindingDirective,
    row: RowContext,
    field_name: str = '',
    tag: str = ''
) -> str:
    '''
        Resolve the raw value of a field in the row.

        A column known by the header, or an index within the header width, that
        is beyond the end of a short row resolves to an empty string. An index
        beyond the header width is an error even though the row itself may be
        long enough.

        Raises:
        - `UnknownColumnError`: if the column name is not in the header.
        - `IndexOutOfRangeError`: if the index is beyond the header width.
    '''
    if directive.column_name:
        if directive.column_name not in row.column_index:
            raise UnknownColumnError(directive.column_name)
        position = row.column_index[directive.column_name]
    elif directive.column_index >= 0:
        position = directive.column_index
        width = row.header_width
        if position >= width:
            raise IndexOutOfRangeError(position, width, field_name, tag)
    else:
        return ''

    if position >= len(row.columns):
        return ''
    return row.columns[position]


def bind_field(field: BoundField, row: RowContext) -> Any:
    '''
        Locate and convert the value of one analysed field.
    '''
    try:
        value = locate(field.directive, row, field.name, field.tag)
        return convert_kind(
            value,
            field.type,
            field.kind,
            optional=field.optional,
            format=field.directive.format,
            field_name=field.name
        )
    except BindingError as e:
        raise e.with_context(field.name, field.tag, field.type_name)


def bind(target: DataclassType, row: RowContext) -> DataclassType:
    '''
        Populate a dataclass instance in place with the values of a row.

        The bound fields are set one by one in declaration order. The first error
        stops the binding, the fields set before it keep their new values, so a
        record that failed to bind should be discarded.

        Parameters:
        - target (`DataclassType`): the dataclass instance to populate.
        - row (`RowContext`): the row values and the header.

        Returns:
        - `DataclassType`: the target itself.

        Raises:
        - `BindingError`: annotated with the field name, tag and type.
        - `TypeError`:
            if the target is not a dataclass instance, or is frozen, see
            `bind_record`.

        Example:
        ```python
        @dataclass
        class Person:
            name: str = BindingField('name', default='')
            age: int = BindingField('age', default=0)

        row = RowContext.from_header(['name', 'age'], ['Ada', '36'])
        person = bind(Person(), row)
        ```
    '''
    if not is_dataclass(target) or isinstance(target, type):
        raise TypeError(f'{target!r} is not a dataclass instance')
    if type(target).__dataclass_params__.frozen:
        raise TypeError(
            f'{type(target).__name__} is frozen, bind it with bind_record'
        )

    for field in analysis_dataclass(type(target)):
        setattr(target, field.name, bind_field(field, row))

    return target


def bind_record(cls: Type[DataclassType], row: RowContext) -> DataclassType:
    '''
        Create a dataclass instance from the values of a row.

        Unlike `bind`, nothing is created when a field fails, and frozen
        dataclasses are supported. The fields without directive take their
        defaults.

        Raises:
        - `BindingError`: annotated with the field name, tag and type.
        - `TypeError`:
            if `cls` is not a dataclass type, or a field without directive has
            no default.
    '''
    init_kwargs: Dict[str, Any] = {}
    for field in analysis_dataclass(cls):
        init_kwargs[field.name] = bind_field(field, row)

    return cls(**init_kwargs)
