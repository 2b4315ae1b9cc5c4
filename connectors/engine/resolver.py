"""
Row resolvers and static column maps.

Each entity type declares one ColumnMap at import time. The map is read-only
and shared by every fetch of that entity type.
"""

from dataclasses import dataclass
from operator import attrgetter
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Tuple


@dataclass(frozen=True)
class Column:
    """A table column as reported to the host for describe-style introspection."""

    name: str
    type: type
    description: str = ""


class ColumnMap:
    """
    Static name -> ordinal and ordinal -> accessor tables for one entity type.
    """

    def __init__(self, entries: Iterable[Tuple[Column, Callable[[Any], Any]]]):
        columns: List[Column] = []
        name_to_index: Dict[str, int] = {}
        index_to_accessor: Dict[int, Callable[[Any], Any]] = {}

        for index, (column, accessor) in enumerate(entries):
            if column.name in name_to_index:
                raise ValueError(f"Duplicate column name: {column.name}")
            columns.append(column)
            name_to_index[column.name] = index
            index_to_accessor[index] = accessor

        self._columns = tuple(columns)
        self._name_to_index = MappingProxyType(name_to_index)
        self._lower_name_to_index = MappingProxyType({name.lower(): index for name, index in name_to_index.items()})
        self._index_to_accessor = MappingProxyType(index_to_accessor)

    @classmethod
    def from_attributes(cls, definitions: Iterable[Tuple[str, type, str]]) -> "ColumnMap":
        """
        Build a map from ``(column name, column type, entity attribute)`` triples.
        """
        return cls((Column(name, column_type), attrgetter(attribute)) for name, column_type, attribute in definitions)

    @property
    def columns(self) -> Tuple[Column, ...]:
        return self._columns

    @property
    def name_to_index(self) -> Mapping[str, int]:
        return self._name_to_index

    @property
    def index_to_accessor(self) -> Mapping[int, Callable[[Any], Any]]:
        return self._index_to_accessor

    def index_of(self, name: str) -> int:
        """Ordinal of a column; exact name first, then case-insensitive."""
        if name in self._name_to_index:
            return self._name_to_index[name]
        return self._lower_name_to_index[name.lower()]

    def __contains__(self, name: str) -> bool:
        return name in self._name_to_index or name.lower() in self._lower_name_to_index

    def __len__(self) -> int:
        return len(self._columns)


class EntityResolver:
    """One entity paired with the column map of its type."""

    __slots__ = ("entity", "column_map")

    def __init__(self, entity: Any, column_map: ColumnMap):
        self.entity = entity
        self.column_map = column_map

    def get(self, index: int) -> Any:
        return self.column_map.index_to_accessor[index](self.entity)

    def __getitem__(self, name: str) -> Any:
        return self.get(self.column_map.index_of(name))

    def has_column(self, name: str) -> bool:
        return name in self.column_map

    def to_dict(self) -> Dict[str, Any]:
        return {column.name: self.get(index) for index, column in enumerate(self.column_map.columns)}

    def __repr__(self) -> str:
        return f"EntityResolver({self.entity!r})"
