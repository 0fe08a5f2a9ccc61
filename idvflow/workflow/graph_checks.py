""" Editor-level sanity checks run on the graph before it is compiled. """

from typing import List, Optional

from .catalog import NodeCatalog
from .models import Graph, NodeKind


def check_graph(graph: Graph, catalog: Optional[NodeCatalog] = None) -> List[str]:
    """
    Report problems the editor highlights on the canvas: duplicate
    single-instance services, a missing or fed start node, unreachable nodes
    and connections to nodes that are gone. Never raises.
    """
    catalog = catalog or NodeCatalog()
    graph = catalog.classify_graph(graph)
    errors: List[str] = []
    node_ids = {n.id for n in graph.nodes}

    for type_name in sorted(catalog.single_instance_types):
        count = sum(1 for n in graph.nodes if n.type == type_name)
        if count > 1:
            errors.append(f"Expected exactly one {type_name} node, found {count}")

    entries = [n for n in graph.nodes if n.kind == NodeKind.ENTRY]
    if len(entries) != 1:
        errors.append(f"Expected exactly one start node, found {len(entries)}")
    for entry in entries:
        if graph.incoming(entry.id):
            errors.append(f"Start node {entry.id} must not have incoming connections")

    for node in graph.nodes:
        if node.kind in (NodeKind.ENTRY, NodeKind.ANNOTATION):
            continue
        if node.type in catalog.single_instance_types:
            continue
        if not graph.incoming(node.id):
            errors.append(f"Node {node.id} has no incoming connections")

    for edge in graph.edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in node_ids:
                errors.append(f"Connection {edge.id} references unknown node {endpoint}")

    return errors
