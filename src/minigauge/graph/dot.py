"""Graphviz DOT renderer.

Turns a :class:`~minigauge.graph.models.Graph` into DOT text::

    digraph model_diagram {
        graph[overlap=false, splines=true]
        "Invoice_1" [shape="Mrecord", label="{Invoice_1 | number: 1\\l}"]

        "Invoice_1" -> "Person_3" [label="Invoiceable"]
    }

Formatting functions are pure: they never touch the option mappings stored
on nodes and edges, so rendering the same graph twice gives the same text.
"""

import logging
import re

from .framework import GraphRenderer
from .models import EdgeSpec, EdgeType, Graph, NodeSpec

logger = logging.getLogger(__name__)

LINE_BREAK = "\\l"  # DOT left-justified line break
DATE_FORMAT = "%b %d %Y - %H:%M"

CARDINALITY_STYLES = {
    EdgeType.ONE_ONE: {"arrowtail": "odot", "arrowhead": "dot", "dir": "both"},
    EdgeType.ONE_MANY: {"arrowtail": "crow", "arrowhead": "dot", "dir": "both"},
    EdgeType.MANY_MANY: {"arrowtail": "crow", "arrowhead": "crow", "dir": "both"},
    EdgeType.IS_A: {"arrowtail": "onormal", "arrowhead": "none"},
    EdgeType.UNTYPED: {},
}

EMPTY_RECORD_STYLE = {"style": "dotted", "color": "gray61"}

_RECORD_SPECIALS = re.compile(r"([{}|<>])")


def escape_label(text: str) -> str:
    """Escape text for use inside a double-quoted DOT string."""
    if not text:
        return ""
    return str(text).replace("\\", "\\\\").replace('"', '\\"')


def escape_record_text(text: str) -> str:
    """Escape text for a field of a record-shaped node label."""
    return _RECORD_SPECIALS.sub(r"\\\1", escape_label(text))


def graph_identifier(graph_type: str) -> str:
    """Lowercased graph type usable as a bare DOT identifier."""
    identifier = re.sub(r"[^a-z0-9_]", "_", graph_type.lower())
    # Bare DOT identifiers cannot start with a digit
    if not re.match(r"[a-z_]", identifier):
        identifier = f"_{identifier}"
    return identifier


def format_options(options: dict) -> str:
    return ", ".join(f'{key}="{escape_label(str(value))}"' for key, value in options.items())


def record_label(node: NodeSpec) -> str:
    """Record label: the node label, then one left-justified line per attribute."""
    body = "".join(f"{escape_record_text(line)}{LINE_BREAK}" for line in node.attributes)
    return f"{{{escape_record_text(node.display_label)} | {body}}}"


def format_node(node: NodeSpec) -> str:
    """Take a node and format it into a DOT node statement."""
    extra = {k: v for k, v in node.options.items() if k not in ("shape", "label")}
    opts = f'shape="{escape_label(node.options.get("shape", "Mrecord"))}", label="{record_label(node)}"'
    if extra:
        opts += ", " + format_options(extra)
    return f'\t"{escape_label(node.name)}" [{opts}]\n'


def edge_options(edge: EdgeSpec) -> dict:
    """Resolve the options of an edge.

    Later sources win: caller options, then the label, then the cardinality
    arrows, then the dotted styling of an empty record.
    """
    options = dict(edge.options)
    if edge.label:
        options["label"] = edge.label
    options.update(CARDINALITY_STYLES[EdgeType(edge.type)])
    if edge.empty_record:
        options.update(EMPTY_RECORD_STYLE)
    return options


def format_edge(edge: EdgeSpec) -> str:
    """Take an edge and format it into a DOT edge statement."""
    statement = f'\t"{escape_label(edge.source)}" -> "{escape_label(edge.destination)}"'
    options = edge_options(edge)
    if options:
        statement += f" [{format_options(options)}]"
    return statement + "\n"


def format_label_block(graph: Graph) -> str:
    """Build the plaintext node holding title, date, schema version and description."""
    lines = [
        f"{graph.title} ",
        f"Date: {graph.generated_at.strftime(DATE_FORMAT)}",
    ]
    if graph.schema_version:
        lines.append(f"Migration version: {graph.schema_version}")
    lines.append(f"Description: {graph.description}")
    text = "".join(f"{escape_label(line)}{LINE_BREAK}" for line in lines)
    return f'\t_diagram_info [shape="plaintext", label="{text}{LINE_BREAK}", fontsize=14]\n'


def _unique(items: list) -> list:
    result = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


class DotRenderer(GraphRenderer):
    """Graphviz DOT renderer for entity graphs."""

    @property
    def format_name(self) -> str:
        return "graphviz"

    def get_file_extension(self) -> str:
        return ".dot"

    def render(self, graph: Graph) -> str:
        """Render the graph as a DOT digraph."""
        parts = [
            f"digraph {graph_identifier(graph.graph_type)}_diagram {{\n",
            "\tgraph[overlap=false, splines=true]\n",
        ]
        if graph.show_label:
            parts.append(format_label_block(graph))

        # Hooks may append to the lists directly, so dedup again here
        nodes = _unique(graph.nodes)
        edges = _unique(graph.edges)
        parts.extend(format_node(node) for node in nodes)
        parts.append("\n")
        parts.extend(format_edge(edge) for edge in edges)
        parts.append("}\n")

        logger.info(f"Rendered {graph.graph_type} diagram with {len(nodes)} nodes and {len(edges)} edges")
        return "".join(parts)
