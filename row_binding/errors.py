'''
errors raised while binding a row to a dataclass.
'''
from typing import Optional


class BindingError(ValueError):
    '''
        Base class of all the errors raised while binding a row.

        The binder annotates the error with the field it was raised for, so the
        same exception object carries the context once it reaches the caller.

        Attributes:
        - field_name (`str`): name of the dataclass field being bound.
        - tag (`str`): the raw binding directive of the field.
        - type_name (`str`): name of the declared type of the field.
    '''

    def __init__(self, message: str) -> None:
        super(BindingError, self).__init__(message)
        self.message = message
        self.field_name = ''
        self.tag = ''
        self.type_name = ''

    def with_context(
        self, field_name: str, tag: str, type_name: str
    ) -> 'BindingError':
        if not self.field_name:
            self.field_name = field_name
        self.tag = tag
        self.type_name = type_name
        self.args = (str(self), )
        return self

    def __str__(self) -> str:
        if not self.field_name:
            return self.message
        context = f'field "{self.field_name}" [{self.tag}]'
        if self.type_name:
            context += f', type {self.type_name}'
        return f'{self.message} ({context})'


class MalformedAnnotationError(BindingError):
    '''
        The `index:` option of a binding directive is not an integer.
    '''

    def __init__(self, tag: str, option: str) -> None:
        super(MalformedAnnotationError, self).__init__(
            f'invalid index option "{option}" in tag "{tag}"'
        )
        self.tag = tag
        self.option = option


class UnknownColumnError(BindingError):

    def __init__(self, column: str) -> None:
        super(UnknownColumnError,
              self).__init__(f'invalid column "{column}"')
        self.column = column


class IndexOutOfRangeError(BindingError):
    '''
        The column index is beyond the declared header width.
    '''

    def __init__(
        self, index: int, width: int, field_name: str = '', tag: str = ''
    ) -> None:
        super(IndexOutOfRangeError, self).__init__(
            f'index {index} out of range for {width} columns'
        )
        self.index = index
        self.width = width
        self.field_name = field_name
        self.tag = tag


class ConversionError(BindingError):
    '''
        A raw value could not be converted to the declared type.

        Attributes:
        - value (`str`): the raw value.
        - target (`str`): name of the type the value was converted to.
        - cause (`Optional[BaseException]`): the original error of the parser,
          kept unchanged.
    '''

    def __init__(
        self,
        value: str,
        target: str,
        reason: str = '',
        field_name: str = '',
        cause: Optional[BaseException] = None
    ) -> None:
        if not reason and cause is not None:
            reason = str(cause) or type(cause).__name__
        super(ConversionError, self).__init__(
            f'failed to convert value "{value}" to type {target}: {reason}'
        )
        self.value = value
        self.target = target
        self.reason = reason
        self.field_name = field_name
        self.cause = cause


class UnsupportedTypeError(BindingError):

    def __init__(self, kind: str) -> None:
        super(UnsupportedTypeError, self).__init__(f'unsupported type {kind}')
        self.kind = kind


class HeaderError(BindingError):
    '''
        The header could not be established, e.g. the input has no rows.
    '''
