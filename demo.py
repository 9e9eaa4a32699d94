import csv
import io
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from row_binding import Field, RecordReader, UInt8


class Team(Enum):
    CORE = 'core'
    DOCS = 'docs'


@dataclass
class Member:

    name: str = Field('name', default='')
    age: UInt8 = Field('age', default=UInt8(0))
    joined: date = Field('joined,format:%Y-%m-%d', default=None)
    team: Team = Field('team', default=Team.CORE)
    rate: Optional[Decimal] = Field('index:4', default=None)
    active: bool = Field('active', default=True)
    comment: str = Field('-', default='')


DATA = '''name,age,joined,team,rate,active
Ada,36,2021-03-01,core,42.50,true
Grace,45,2019-11-20,docs,,F
'''

if __name__ == '__main__':
    reader = RecordReader(csv.reader(io.StringIO(DATA)))

    for member in reader.read_records(Member):
        print(member)
