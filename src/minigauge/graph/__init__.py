"""Graph model and renderers.

Nodes and typed edges are collected in a :class:`Graph`, which deduplicates
on insert; :class:`DotRenderer` turns it into Graphviz DOT text.
"""

from .dot import DotRenderer
from .framework import GraphRenderer
from .models import EdgeSpec, EdgeType, Graph, NodeSpec

__all__ = [
    "Graph",
    "GraphRenderer",
    "DotRenderer",
    "NodeSpec",
    "EdgeSpec",
    "EdgeType",
]
