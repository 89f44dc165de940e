"""minigauge - Graphviz diagrams of related domain objects.

minigauge walks an entity and the relations named in an include
specification, collects them into a deduplicated graph of nodes and typed
edges, and renders that graph as DOT text.
"""

__version__ = "0.1.0"
__author__ = "minigauge contributors"
__description__ = "Graphviz DOT diagrams of entities and their relations"

from minigauge.config import DiagramOptions, GaugeConfig, load_config
from minigauge.entity import EntityAdapter, EntitySchema, Record, RelationMacro, RelationMeta
from minigauge.errors import InvalidArgument, MiniGaugeError, UnresolvedRelation
from minigauge.graph import DotRenderer, EdgeSpec, EdgeType, Graph, NodeSpec
from minigauge.traversal import fill_graph, fill_with_relations, schema_to_dot_notation, to_dot_notation

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "DiagramOptions",
    "GaugeConfig",
    "load_config",
    "EntityAdapter",
    "EntitySchema",
    "Record",
    "RelationMacro",
    "RelationMeta",
    "InvalidArgument",
    "MiniGaugeError",
    "UnresolvedRelation",
    "DotRenderer",
    "EdgeSpec",
    "EdgeType",
    "Graph",
    "NodeSpec",
    "fill_graph",
    "fill_with_relations",
    "schema_to_dot_notation",
    "to_dot_notation",
]
