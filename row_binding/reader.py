'''
A reader iterating the rows of a delimited text and binding them to dataclasses.
'''
from typing import (
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Type,
)

from .binder import bind, bind_record
from .errors import HeaderError, UnknownColumnError
from .types import DataclassType, RowContext, index_header


class RecordReader:
    '''
        A reader binding the rows of a delimited text to dataclasses.

        The rows are supplied by any iterable of string sequences, typically a
        `csv.reader`. By default the first row is read as the header on creation.

        Parameters:
        - rows (`Iterable[Sequence[str]]`): the rows to read.
        - header (`Optional[Sequence[str]]`, optional):
            The header columns. When given, no header is read from the rows.
        - read_header (`bool`, optional):
            Whether to read the header from the first row, default True. Without
            header the fields can only be bound with `index:`.

        Example:
        ```python
        import csv
        from dataclasses import dataclass
        from datetime import date

        @dataclass
        class Person:
            name: str = BindingField('name', default='')
            birthday: date = BindingField('birthday,format:%Y-%m-%d', default=None)

        with open('people.csv', newline='', encoding='utf-8') as f:
            reader = RecordReader(csv.reader(f))
            for person in reader.read_records(Person):
                print(person.name, person.birthday)
        ```
    '''

    def __init__(
        self,
        rows: Iterable[Sequence[str]],
        header: Optional[Sequence[str]] = None,
        read_header: bool = True
    ) -> None:
        if rows is None:
            raise TypeError('rows must not be None')
        self._rows = iter(rows)
        self._columns: List[str] = []
        self._column_index: Dict[str, int] = {}
        self._line = 0

        if header is not None:
            self.set_header(header)
        elif read_header:
            if not self.next_row():
                raise HeaderError('no row to read the header from')
            self.read_header()

    @property
    def columns(self) -> List[str]:
        return self._columns

    @property
    def current_line(self) -> int:
        '''
            The 1-based number of the current row, 0 before the first one.
        '''
        return self._line

    def header(self) -> List[str]:
        return sorted(self._column_index, key=self._column_index.get)

    def set_header(self, columns: Sequence[str]) -> None:
        '''
            Replace the header. The current row becomes the given columns.
        '''
        self._columns = list(columns)
        self._column_index = index_header(self._columns)

    def read_header(self) -> None:
        '''
            Use the current row as the header. Called on creation unless an
            explicit header is given, call it again to re-read the header after
            `next_row`.
        '''
        self.set_header(self._columns)

    def next_row(self) -> bool:
        '''
            Advance to the next row.

            Returns:
            - `bool`: False when there is no row left.
        '''
        try:
            row = next(self._rows)
        except StopIteration:
            return False
        self._columns = list(row)
        self._line += 1
        return True

    def get(self, column_name: str) -> str:
        '''
            Get the value of a column in the current row, empty if the row is
            shorter than the header.

            Raises:
            - `UnknownColumnError`: if the column is not in the header.
        '''
        if column_name not in self._column_index:
            raise UnknownColumnError(column_name)
        return self.get_by_index(self._column_index[column_name])

    def get_by_index(self, column_index: int) -> str:
        if column_index >= len(self._columns):
            return ''
        return self._columns[column_index]

    def row_context(self) -> RowContext:
        return RowContext(
            columns=self._columns, column_index=self._column_index
        )

    def unmarshal_line(self, target: DataclassType) -> DataclassType:
        '''
            Populate a dataclass instance with the current row, see `bind`.
        '''
        return bind(target, self.row_context())

    def read_records(
        self, cls: Type[DataclassType]
    ) -> Iterator[DataclassType]:
        '''
            Read the remaining rows as instances of a dataclass, see
            `bind_record`. The first failing row stops the iteration with its
            error.
        '''
        while self.next_row():
            yield bind_record(cls, self.row_context())

    def __iter__(self) -> Iterator[List[str]]:
        while self.next_row():
            yield self._columns


def read_records(
    rows: Iterable[Sequence[str]],
    cls: Type[DataclassType],
    header: Optional[Sequence[str]] = None,
    read_header: bool = True
) -> Iterator[DataclassType]:
    '''
        Read rows as instances of a dataclass.

        Parameters:
        - rows (`Iterable[Sequence[str]]`): the rows, the first one is the
          header unless `header` is given or `read_header` is False.
        - cls (`Type[DataclassType]`): the dataclass bound to the rows.

        Returns:
        - `Iterator[DataclassType]`: one instance per row.
    '''
    reader = RecordReader(rows, header=header, read_header=read_header)
    return reader.read_records(cls)
