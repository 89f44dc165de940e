"""Relation traversal: fill a Graph from entities and render it.

Instance diagrams follow a nested include specification, the same shape as
eager-load hints::

    invoice.to_dot_notation({"include": ["person", {"invoice_items": "product"}]})

Schema diagrams draw every declared relation of a type, one level deep.
Both entry points accept a hook called with the populated Graph before it
is rendered, so callers can add further nodes and edges.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .config import DiagramOptions
from .errors import InvalidArgument
from .graph.models import EdgeSpec, EdgeType, Graph, NodeSpec
from .inflection import camelize, humanize, singularize, underscore

logger = logging.getLogger(__name__)

GraphHook = Callable[[Graph], None]


def normalize_include(include: Any) -> list[tuple[str, Any]]:
    """Flatten an include specification into ``(relation, nested)`` pairs.

    A bare name or a sequence of names yields ``nested=None``; a mapping
    entry yields its value as the nested specification.

    Examples:
        >>> normalize_include(["product", {"invoice_item": "invoice"}])
        [('product', None), ('invoice_item', 'invoice')]
    """
    if include is None:
        return []
    if isinstance(include, str):
        return [(include, None)]
    if isinstance(include, Mapping):
        pairs = []
        for name, nested in include.items():
            if not isinstance(name, str):
                raise InvalidArgument(f"Relation names must be strings, got {name!r}")
            pairs.append((name, nested))
        return pairs
    if isinstance(include, Iterable):
        pairs = []
        for item in include:
            pairs.extend(normalize_include(item))
        return pairs
    raise InvalidArgument(f"Unsupported include specification: {include!r}")


def normalize_data(data: Any) -> list[Any]:
    """Turn a resolved relation into a non-empty list; None marks missing data."""
    if data is None:
        return [None]
    if hasattr(data, "node_identity") or isinstance(data, (str, bytes, Mapping)):
        return [data]
    if isinstance(data, Iterable):
        items = list(data)
        return items or [None]
    return [data]


def fill_graph(entity, graph: Graph, include: Any = None) -> Graph:
    """Add ``entity`` and the relations named by ``include`` to ``graph``.

    Recursion depth follows the nesting of ``include``; entities already in
    the graph are not skipped, repeated nodes and edges are deduplicated by
    the graph itself.
    """
    graph.add_node(entity.node_definition())
    source_name = entity.node_identity()

    for relation, nested in normalize_include(include):
        logger.debug(f"Following {source_name}.{relation}")
        data = entity.resolve(relation)

        for obj in normalize_data(data):
            if obj is None:
                # Included but nothing found, e.g. an unset belongs_to
                graph.add(source=entity, destination=None, label=relation)
                continue

            fill_graph(obj, graph, nested)
            graph.add_edge(EdgeSpec(
                source=source_name,
                destination=obj.node_identity(),
                label=humanize(relation),
            ))

    return graph


def relation_label(meta) -> str:
    """Edge label for a declared relation, empty when it just repeats the type name."""
    if meta.class_name == camelize(singularize(underscore(meta.name))):
        return ""
    return underscore(meta.name)


def fill_with_relations(schema, graph: Graph) -> Graph:
    """Add the direct relations (and parent type) of ``schema`` to ``graph``."""
    source_name = schema.node_identity()

    for meta in schema.all_relations():
        label = relation_label(meta)
        edge_type = meta.cardinality

        if meta.polymorphic:
            graph.add_node(NodeSpec(
                name=meta.class_name,
                attributes=["polymorphic record"],
                options={"color": graph.placeholder_color},
            ))
            graph.add_edge(EdgeSpec(
                source=source_name,
                destination=meta.class_name,
                label=label,
                type=edge_type,
                empty_record=True,
            ))
        else:
            target = meta.klass
            graph.add_node(target.node_definition())
            graph.add_edge(EdgeSpec(
                source=source_name,
                destination=target.node_identity(),
                label=label,
                type=edge_type,
            ))

    if schema.parent is not None:
        graph.add_node(schema.parent.node_definition())
        graph.add_edge(EdgeSpec(
            source=source_name,
            destination=schema.parent.node_identity(),
            type=EdgeType.IS_A,
        ))

    logger.debug(f"Added {len(schema.all_relations())} relations of {source_name}")
    return graph


def to_dot_notation(entity, options: DiagramOptions | dict | None = None, hook: GraphHook | None = None) -> str:
    """Render an instance diagram of ``entity`` following ``options.include``."""
    options = DiagramOptions.coerce(options)
    schema = getattr(entity, "schema", None)
    if schema is not None:
        graph = Graph.from_options(
            options,
            schema_version=schema.schema_version,
            placeholder_color=schema.config.placeholder_color,
        )
    else:
        graph = Graph.from_options(options)

    fill_graph(entity, graph, options.include)

    if hook is not None:
        hook(graph)

    return graph.render()


def schema_to_dot_notation(schema, options: DiagramOptions | dict | None = None, hook: GraphHook | None = None) -> str:
    """Render a schema diagram of ``schema`` and its direct relations."""
    options = DiagramOptions.coerce(options)
    graph = Graph.from_options(
        options,
        schema_version=schema.schema_version,
        placeholder_color=schema.config.placeholder_color,
    )

    graph.add_node(schema.node_definition())
    fill_with_relations(schema, graph)

    if hook is not None:
        hook(graph)

    return graph.render()
