from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import pytest

from ..binder import bind
from ..types import BindingField, DataKind, RowContext
from ..utils import analysis_dataclass

if TYPE_CHECKING:
    from decimal import Decimal


@dataclass
class PartlyTyped:
    count: int = BindingField('count', default=0)
    label: Optional[str] = BindingField('label', default=None)
    note: Decimal = BindingField('-', default=None)


@dataclass
class UnresolvedBound:
    amount: Decimal = BindingField('amount', default=None)


def test_unresolved_excluded_field_is_ignored():
    bound = analysis_dataclass(PartlyTyped)

    assert [(f.name, f.type, f.kind) for f in bound] == [
        ('count', int, DataKind.Int), ('label', str, DataKind.String)
    ]

    row = RowContext.from_header(['count', 'label'], ['42', ''])
    result = bind(PartlyTyped(), row)

    assert result.count == 42
    assert result.label is None


def test_unresolved_bound_field_fails():
    with pytest.raises(NameError):
        analysis_dataclass(UnresolvedBound)
