"""Graph data models: nodes, typed edges and the deduplicating Graph."""

import itertools
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from slugify import slugify

from ..errors import InvalidArgument
from ..inflection import humanize, titleize, underscore

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = "_empty_"


class EdgeType(str, Enum):
    """Relationship cardinality drawn on an edge."""
    ONE_ONE = "one-one"
    ONE_MANY = "one-many"
    MANY_MANY = "many-many"
    IS_A = "is-a"
    UNTYPED = "untyped"


@dataclass
class NodeSpec:
    """Specification for an entity node."""
    name: str  # Unique key within a graph
    label: str | None = None  # Display label, falls back to name
    attributes: list[str] = field(default_factory=list)  # Rendered "key: value" lines
    options: dict[str, str] = field(default_factory=dict)

    @property
    def display_label(self) -> str:
        return self.label or self.name


@dataclass
class EdgeSpec:
    """Specification for a relation edge between two nodes."""
    source: str
    destination: str
    label: str | None = None
    type: EdgeType = EdgeType.UNTYPED
    options: dict[str, str] = field(default_factory=dict)
    empty_record: bool = False  # Destination is a placeholder node


def node_name_of(item: Any) -> str:
    """Return the node name for an entity adapter, a NodeSpec or a plain name."""
    if isinstance(item, NodeSpec):
        return item.name
    if hasattr(item, "node_identity"):
        return item.node_identity()
    if isinstance(item, str):
        return item
    raise InvalidArgument(f"Cannot derive a node name from {item!r}")


def node_definition_of(item: Any) -> NodeSpec:
    """Return a NodeSpec for an entity adapter, or the NodeSpec itself."""
    if isinstance(item, NodeSpec):
        return item
    if hasattr(item, "node_definition"):
        return item.node_definition()
    if isinstance(item, str):
        return NodeSpec(name=item)
    raise InvalidArgument(f"Cannot derive a node definition from {item!r}")


class Graph:
    """Ordered, deduplicated collection of nodes and edges for one diagram."""

    def __init__(
        self,
        graph_type: str = "Model",
        show_label: bool = True,
        title: str | None = None,
        description: str = "",
        schema_version: str | None = None,
        placeholder_color: str = "gray61",
        generated_at: datetime | None = None,
    ):
        self.graph_type = graph_type
        self.show_label = show_label
        self.title = title or f"{graph_type} diagram"
        self.description = description
        self.schema_version = schema_version
        self.placeholder_color = placeholder_color
        self.generated_at = generated_at or datetime.now()
        self.nodes: list[NodeSpec] = []
        self.edges: list[EdgeSpec] = []
        self._placeholder_ids = itertools.count(1)

    @classmethod
    def from_options(cls, options, **kwargs) -> "Graph":
        """Create a graph from DiagramOptions."""
        return cls(
            graph_type=options.graph_type,
            show_label=options.show_label,
            title=options.title,
            description=options.description,
            **kwargs,
        )

    def add_node(self, node: Any) -> NodeSpec:
        """Add a node unless an equal one is already present."""
        node = node_definition_of(node)
        if node not in self.nodes:
            self.nodes.append(node)
        return node

    def add_edge(self, edge: EdgeSpec) -> EdgeSpec:
        """Add an edge unless an equal one is already present."""
        if edge not in self.edges:
            self.edges.append(edge)
        return edge

    def has_node(self, name: str) -> bool:
        return any(node.name == name for node in self.nodes)

    def _placeholder_name(self, label: str) -> str:
        """Unused node name for a placeholder, outside the ``<Type>_<key>`` entity names."""
        slug = slugify(label, separator="_")
        while True:
            candidate = f"{PLACEHOLDER_PREFIX}{slug}_{next(self._placeholder_ids)}"
            if not self.has_node(candidate):
                return candidate

    def nil_node_definition(self, name: str | None = None, label: str | None = None) -> NodeSpec:
        """Return a placeholder node for a relation that resolved to nothing."""
        if not name and not label:
            raise InvalidArgument("Must supply at least a name or a label")

        return NodeSpec(
            name=name or underscore(label),
            label=label or titleize(humanize(name)),
            attributes=["none"],
            options={"color": self.placeholder_color},
        )

    def add(
        self,
        source: Any,
        destination: Any = None,
        label: str | None = None,
        type: EdgeType | str = EdgeType.UNTYPED,
    ) -> EdgeSpec:
        """Connect two entities, or an entity and a placeholder when destination is None."""
        if source is None:
            raise InvalidArgument("Must supply a source")
        if destination is None and label is None:
            raise InvalidArgument("Cannot supply an empty destination without a label")

        edge_type = EdgeType(type)
        source_name = node_name_of(source)

        if destination is None:
            node_name = self._placeholder_name(label)
            self.add_node(self.nil_node_definition(name=node_name, label=label))
            logger.debug(f"Added placeholder {node_name} for {source_name}")
            return self.add_edge(EdgeSpec(
                source=source_name,
                destination=node_name,
                type=edge_type,
                empty_record=True,
            ))

        destination_name = node_name_of(destination)
        if not self.has_node(source_name):
            self.add_node(source)
        if not self.has_node(destination_name):
            self.add_node(destination)

        return self.add_edge(EdgeSpec(
            source=source_name,
            destination=destination_name,
            label=label,
            type=edge_type,
        ))

    def render(self, renderer=None) -> str:
        """Render the graph, as DOT unless another renderer is given."""
        if renderer is None:
            from .dot import DotRenderer
            renderer = DotRenderer()
        return renderer.render(self)
