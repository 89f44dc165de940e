"""Entity adapters: what a domain object provides to take part in a diagram.

Instance diagrams walk :class:`EntityAdapter` objects; :class:`Record` is a
generic adapter over an attribute mapping plus a mapping of relation names
to accessor functions. Type (schema) diagrams use :class:`EntitySchema`,
which describes declared fields and relation metadata instead of data.
"""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import GaugeConfig
from .errors import InvalidArgument, UnresolvedRelation
from .graph.models import EdgeType, NodeSpec

logger = logging.getLogger(__name__)

_QUOTES = re.compile(r"['\"]")


class RelationMacro(str, Enum):
    """How a relation is declared on its owning type."""
    HAS_ONE = "has_one"
    BELONGS_TO = "belongs_to"
    HAS_MANY = "has_many"
    HAS_AND_BELONGS_TO_MANY = "has_and_belongs_to_many"


@dataclass
class Relation:
    """A relation of an entity instance, resolved on demand."""
    name: str
    cardinality: EdgeType
    accessor: Callable[[], Any]

    def resolve(self) -> Any:
        return self.accessor()


@dataclass
class RelationMeta:
    """Declared relation of an entity type."""
    name: str
    macro: RelationMacro
    class_name: str  # Declared target type name
    target: "EntitySchema | Callable[[], EntitySchema] | None" = None
    through: str | None = None  # Join/indirection relation, if any
    polymorphic: bool = False

    @property
    def klass(self) -> "EntitySchema":
        """Target schema; callables allow schemas that refer to each other."""
        target = self.target
        if callable(target):
            target = target()
        if target is None:
            raise UnresolvedRelation(
                self.class_name,
                self.name,
                message=f"Relation '{self.name}' has no {self.class_name} schema to point to",
            )
        return target

    @property
    def cardinality(self) -> EdgeType:
        if self.macro in (RelationMacro.HAS_ONE, RelationMacro.BELONGS_TO):
            return EdgeType.ONE_ONE
        if self.macro == RelationMacro.HAS_MANY and not self.through:
            return EdgeType.ONE_MANY
        return EdgeType.MANY_MANY


@dataclass(eq=False)
class EntitySchema:
    """Type-level adapter: a named type with declared fields and relations."""
    name: str
    fields: dict[str, str] = field(default_factory=dict)  # field name -> declared type
    relations: list[RelationMeta] = field(default_factory=list)
    table_name: str | None = None
    primary_key: str = "id"
    parent: "EntitySchema | None" = None  # Single table inheritance parent
    hidden_fields: list[str] = field(default_factory=list)
    schema_version: str | None = None
    config: GaugeConfig = field(default_factory=GaugeConfig)

    def node_identity(self) -> str:
        return self.name

    def denied_fields(self) -> frozenset[str]:
        return self.config.denied_fields(self.table_name) | set(self.hidden_fields)

    def type_node_attributes(self) -> list[str]:
        """Declared field names and types, without denylisted fields."""
        denied = self.denied_fields()
        return [f"{name} :{kind}" for name, kind in self.fields.items() if name not in denied]

    def node_definition(self) -> NodeSpec:
        return NodeSpec(name=self.node_identity(), attributes=self.type_node_attributes())

    def all_relations(self) -> list[RelationMeta]:
        return list(self.relations)

    def relation(self, name: str) -> RelationMeta:
        for meta in self.relations:
            if meta.name == name:
                return meta
        raise UnresolvedRelation(self.name, name)

    def fill_with_relations(self, graph) -> None:
        """Add every declared relation of this type to ``graph``."""
        from .traversal import fill_with_relations
        fill_with_relations(self, graph)

    def to_dot_notation(self, options=None, hook=None) -> str:
        """Render a schema diagram of this type and its direct relations."""
        from .traversal import schema_to_dot_notation
        return schema_to_dot_notation(self, options, hook)


class EntityAdapter(ABC):
    """Capabilities an entity needs to be drawn in an instance diagram."""

    @abstractmethod
    def node_identity(self) -> str:
        """Graph-unique node name, conventionally ``<TypeName>_<key>``."""
        pass

    @abstractmethod
    def node_attributes(self) -> list[str]:
        """Rendered ``field: value`` lines for the entity's own data."""
        pass

    @abstractmethod
    def resolve(self, name: str) -> Any:
        """Return the entity, entities or None a relation points to.

        Raises:
            UnresolvedRelation: If the entity has no relation called ``name``
        """
        pass

    @abstractmethod
    def relations(self) -> list[Relation]:
        """All relations of this entity."""
        pass

    def node_definition(self) -> NodeSpec:
        name = self.node_identity()
        return NodeSpec(name=name, label=name, attributes=self.node_attributes())

    def fill_graph(self, graph, include=None) -> None:
        """Add this entity and the relations named by ``include`` to ``graph``."""
        from .traversal import fill_graph
        fill_graph(self, graph, include)

    def to_dot_notation(self, options=None, hook=None) -> str:
        """Render a diagram of this entity and the included relations."""
        from .traversal import to_dot_notation
        return to_dot_notation(self, options, hook)


class Record(EntityAdapter):
    """Generic entity adapter over an attribute mapping.

    Args:
        schema: Type of the record
        attributes: Persisted field values, in display order
        relations: Relation name -> value, or a callable taking the record
        synthetic_id: Identity used when the primary key is not set; a record
            with neither cannot be placed in a graph
    """

    def __init__(
        self,
        schema: EntitySchema,
        attributes: Mapping[str, Any] | None = None,
        relations: Mapping[str, Any] | None = None,
        synthetic_id: str | None = None,
    ):
        self.schema = schema
        self.attributes = dict(attributes or {})
        self._relations = dict(relations or {})
        self._synthetic_id = synthetic_id

    @property
    def key(self) -> Any:
        return self.attributes.get(self.schema.primary_key)

    def node_identity(self) -> str:
        key = self.key
        if key is None:
            key = self._synthetic_id
        if key is None:
            raise InvalidArgument(
                f"{self.schema.name} record has no {self.schema.primary_key} and no synthetic_id"
            )
        return f"{self.schema.name}_{key}"

    def node_attributes(self) -> list[str]:
        denied = self.schema.denied_fields()
        return [
            f"{name}: {_QUOTES.sub('', str(value))}"
            for name, value in self.attributes.items()
            if name not in denied and value is not None
        ]

    def set_relation(self, name: str, value: Any) -> None:
        self._relations[name] = value

    def resolve(self, name: str) -> Any:
        if name not in self._relations:
            # Declared on the type but never loaded: nothing to show
            if any(meta.name == name for meta in self.schema.relations):
                return None
            raise UnresolvedRelation(self.node_identity(), name)

        value = self._relations[name]
        if callable(value):
            value = value(self)
        logger.debug(f"Resolved {self.node_identity()}.{name}")
        return value

    def relations(self) -> list[Relation]:
        declared = {meta.name: meta.cardinality for meta in self.schema.relations}
        names = list(declared) + [name for name in self._relations if name not in declared]
        result = []
        for name in names:
            cardinality = declared.get(name, EdgeType.UNTYPED)
            result.append(Relation(name=name, cardinality=cardinality, accessor=lambda n=name: self.resolve(n)))
        return result

    def __repr__(self):
        key = self.key if self.key is not None else self._synthetic_id
        return f"Record({self.schema.name}, {key!r})"
