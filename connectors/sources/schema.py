"""
Schema base: table lookup, constructor signatures and row source dispatch.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Tuple

from connectors.core.exceptions import NotSupportedError
from connectors.core.logging_config import LoggerMixin
from connectors.engine.chunks import RowSource
from connectors.engine.context import RuntimeContext
from connectors.engine.resolver import Column, ColumnMap


@dataclass(frozen=True)
class Constructor:
    """One accepted parameter list of a table, e.g. ``issues(owner, repo)``."""

    table: str
    parameters: Tuple[Tuple[str, type], ...] = ()

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def __str__(self) -> str:
        names = ", ".join(name for name, _ in self.parameters)
        return f"{self.table}({names})"


class Schema(LoggerMixin):
    """
    Entry point the host uses to describe and read the tables of one system.

    Subclasses declare ``schema_name``, ``tables``, ``constructors`` and
    ``library`` and implement create_api() and create_row_source().
    """

    schema_name: ClassVar[str] = ""
    tables: ClassVar[Mapping[str, ColumnMap]] = MappingProxyType({})
    constructors: ClassVar[Mapping[str, Tuple[Constructor, ...]]] = MappingProxyType({})
    library: ClassVar[Mapping[str, Callable[..., Any]]] = MappingProxyType({})

    def __init__(self, api: Any = None):
        self._api = api

    @property
    def api(self) -> Any:
        if self._api is None:
            self._api = self.create_api()
        return self._api

    def create_api(self) -> Any:
        raise NotImplementedError

    def create_row_source(self, table: str, context: RuntimeContext, parameters: Tuple[Any, ...]) -> RowSource:
        raise NotImplementedError

    def get_table(self, name: str) -> Tuple[Column, ...]:
        """Static column list of a table, for describe-style introspection."""
        return self.tables[self._table_name(name)].columns

    def get_constructors(self, name: Optional[str] = None) -> List[Constructor]:
        """Constructor signatures of one table, or of every table when ``name`` is None."""
        if name is None:
            return [constructor for table in self.constructors.values() for constructor in table]
        return list(self.constructors[self._table_name(name)])

    def get_library(self) -> Dict[str, Callable[..., Any]]:
        """Helper functions the host can call on this schema's rows, by query name."""
        return dict(self.library)

    def get_row_source(self, name: str, context: RuntimeContext, *parameters: Any) -> RowSource:
        """
        Create the row source for ``name(*parameters)``.

        Raises:
            NotSupportedError: Unknown table
            ValueError: No constructor of the table takes that many parameters
            ConfigurationError: No API was injected and the settings lack credentials
        """
        table = self._table_name(name)
        accepted = self.constructors[table]
        if len(parameters) not in {constructor.arity for constructor in accepted}:
            expected = " or ".join(str(constructor) for constructor in accepted)
            raise ValueError(f"Invalid number of parameters for {name}. Expected {expected}.")

        self.logger.debug(f"Creating {self.schema_name}.{table} source with {len(parameters)} parameter(s)")
        return self.create_row_source(table, context, parameters)

    def _table_name(self, name: str) -> str:
        table = name.lower()
        if table not in self.tables:
            available = ", ".join(self.tables)
            raise NotSupportedError(
                f"Data source '{name}' is not supported by {self.schema_name} schema. "
                f"Available data sources: {available}"
            )
        return table
