'''
parse the binding directive declared on a dataclass field.
'''
import re
from dataclasses import Field
from typing import Dict, Optional

from .errors import MalformedAnnotationError
from .types import SKIP_TAG, TAG_KEY, UNSET_INDEX, BindingDirective

INDEX_PREFIX = 'index:'
FORMAT_PREFIX = 'format:'

_INDEX_PATTERN = re.compile(r'[+-]?[0-9]+')


def field_tag(field: Field) -> str:
    '''
        Read the raw binding directive from the metadata of a dataclass field.
        A field without directive has an empty tag.
    '''
    return field.metadata.get(TAG_KEY, '') or ''


def _parse_index(tag: str, option: str) -> int:
    value = option[len(INDEX_PREFIX):]
    if not _INDEX_PATTERN.fullmatch(value):
        raise MalformedAnnotationError(tag, option)
    return int(value)


def parse_tag(tag: str) -> Optional[BindingDirective]:
    '''
        Parse a binding directive.

        The directive is a comma-separated list of options, each stripped of
        surrounding whitespace:
        - `index:<int>`: bind the field to the column at the position.
        - `format:<pattern>`: the pattern to parse temporal values.
        - any other option is the column name.

        When an option is repeated, the last one wins.

        Parameters:
        - tag (`str`): the raw directive.

        Returns:
        - `Optional[BindingDirective]`:
            None if the tag is empty or `-`, that is the field is not bound.

        Raises:
        - `MalformedAnnotationError`: if an `index:` option is not an integer.

        Example:
        ```python
        parse_tag('birthday, format:%Y-%m-%d')
        # BindingDirective(column_name='birthday', column_index=-1, format='%Y-%m-%d')
        ```
    '''
    if not tag or tag == SKIP_TAG:
        return None

    options: Dict[str, object] = {
        'column_name': '',
        'column_index': UNSET_INDEX,
        'format': '',
    }
    for option in tag.split(','):
        option = option.strip()
        if option.startswith(INDEX_PREFIX):
            options['column_index'] = _parse_index(tag, option)
        elif option.startswith(FORMAT_PREFIX):
            options['format'] = option[len(FORMAT_PREFIX):]
        else:
            options['column_name'] = option

    return BindingDirective(**options)
