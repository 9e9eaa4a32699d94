'''
methods to analyse the bound fields of a dataclass.
'''
import sys
import warnings
from dataclasses import Field, fields, is_dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Type, get_type_hints
from weakref import WeakKeyDictionary

from .converter import analysis_type, type_name
from .errors import MalformedAnnotationError
from .tag import field_tag, parse_tag
from .types import BoundField, DataclassType

# weak keys so that classes created at runtime can still be collected
_ANALYSED: 'WeakKeyDictionary[type, Tuple[BoundField, ...]]' = WeakKeyDictionary()


def _resolve_hints(cls: Type[DataclassType]) -> Optional[Dict[str, Any]]:
    try:
        return get_type_hints(cls)
    except (NameError, TypeError):
        # resolved field by field, see `resolve_field_type`
        return None


def resolve_field_type(cls: Type[DataclassType], field: Field) -> Any:
    '''
        Resolve the type hint of one field, evaluating a string annotation in
        the namespace of the module defining the dataclass.

        Raises:
        - `NameError`: if the annotation refers to an unknown name.
    '''
    if not isinstance(field.type, str):
        return field.type
    module = sys.modules.get(cls.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    return eval(field.type, globalns, dict(vars(cls)))


def analysis_field(
    field: Field,
    hint: Optional[Any] = None,
    resolver: Optional[Callable[[Field], Any]] = None
) -> Optional[BoundField]:
    '''
        Analyse one dataclass field.

        Parameters:
        - field (`dataclasses.Field`): the field to analyse.
        - hint (`Optional[Any]`, optional):
            the resolved type hint, `field.type` if not provided.
        - resolver (`Optional[Callable[[Field], Any]]`, optional):
            resolves the type hint when no `hint` is given, only called for a
            bound field.

        Returns:
        - `Optional[BoundField]`: None if the field is not bound.

        Raises:
        - `MalformedAnnotationError`: if the directive has a bad index.
    '''
    tag = field_tag(field)
    try:
        directive = parse_tag(tag)
    except MalformedAnnotationError as e:
        raise e.with_context(field.name, tag, type_name(field.type))
    if directive is None or directive.mode == 'none':
        return None

    if not field.init:
        warnings.warn(
            f'The field "{field.name}" is not in __init__, the tag "{tag}" is ignored.',
            UserWarning
        )
        return None
    if directive.column_name and directive.column_index >= 0:
        warnings.warn(
            f'The field "{field.name}" is bound to the column "{directive.column_name}", '
            f'the index {directive.column_index} is ignored.',
            UserWarning
        )

    if hint is None:
        hint = resolver(field) if resolver is not None else field.type
    dtype, kind, optional = analysis_type(hint)

    return BoundField(
        name=field.name,
        tag=tag,
        directive=directive,
        type=dtype,
        kind=kind,
        optional=optional
    )


def analysis_dataclass(cls: Type[DataclassType]) -> Tuple[BoundField, ...]:
    '''
        Analyse the bound fields of a dataclass, in declaration order.

        The result is cached per dataclass type as the directives cannot change.
        Only the bound fields need a resolvable type hint.

        Raises:
        - `TypeError`: if `cls` is not a dataclass type.
        - `NameError`: if the type hint of a bound field cannot be resolved.
    '''
    if not (isinstance(cls, type) and is_dataclass(cls)):
        raise TypeError(f'{cls!r} is not a dataclass type')
    if cls in _ANALYSED:
        return _ANALYSED[cls]

    hints = _resolve_hints(cls)
    bound = []
    for field in fields(cls):
        if hints is not None:
            res = analysis_field(field, hints.get(field.name))
        else:
            res = analysis_field(
                field, resolver=lambda f: resolve_field_type(cls, f)
            )
        if res:
            bound.append(res)

    _ANALYSED[cls] = tuple(bound)
    return _ANALYSED[cls]
