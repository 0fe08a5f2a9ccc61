""" Load an editor graph and compile it into an engine workflow document. """

import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from .catalog import NodeCatalog
from .conditions import CONDITION_SERVICE, ALWAYS_TRUE, render_edge_condition
from .models import (
    BranchMode, ConditionClause, Edge, Graph, Node, NodeKind,
    MATCH_HANDLE, NOT_MATCH_HANDLE,
)
from .schema import (
    ConditionSpec, EndStep, GraphSpec, MultiServicesStep, ServiceStep, Step,
    WorkflowDocument, validate_graph_payload,
)

logger = logging.getLogger(__name__)

NodeLike = Union[Node, Dict[str, Any]]
EdgeLike = Union[Edge, Dict[str, Any]]

# Targets that never count as parallel sub-steps
_NON_PARALLEL_KINDS = (NodeKind.TERMINAL, NodeKind.ENTRY, NodeKind.ANNOTATION, NodeKind.BRANCH)


class CompilationError(ValueError):
    """The graph cannot be turned into a workflow at all."""


def load_graph(text: str, catalog: Optional[NodeCatalog] = None) -> Graph:
    """
    Load a Graph from the editor's JSON export (or the equivalent YAML).
    """
    if text.lstrip().startswith("{"):
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError("Graph document must be a mapping with 'nodes' and 'edges'")

    for key in ["nodes", "edges"]:
        if key not in data:
            raise ValueError(f"Missing required top-level field: {key}")

    return graph_from_spec(validate_graph_payload(data), catalog)


def graph_from_spec(spec: GraphSpec, catalog: Optional[NodeCatalog] = None) -> Graph:
    catalog = catalog or NodeCatalog()

    nodes = []
    for node_spec in spec.nodes:
        data = node_spec.data
        nodes.append(Node(
            id=node_spec.id,
            type=data.type,
            kind=catalog.kind_of(data.type),
            label=data.label,
            logic_type=_branch_mode(data.logicType),
            conditions=[
                ConditionClause(
                    service=c.service,
                    component=c.component,
                    comparator=c.comparator,
                    value=c.value,
                )
                for c in data.conditions
            ],
        ))

    edges = []
    for edge_spec in spec.edges:
        data = edge_spec.data
        edges.append(Edge(
            id=edge_spec.id,
            source=edge_spec.source,
            target=edge_spec.target,
            source_handle=edge_spec.sourceHandle,
            condition_type=data.conditionType if data else None,
            custom_logic=data.customLogic if data else None,
            engine_condition=data.camundaCondition if data else None,
            label=(data.label or "") if data else "",
        ))

    return Graph(nodes=nodes, edges=edges)


def _branch_mode(value: Optional[str]) -> Optional[BranchMode]:
    try:
        return BranchMode(value) if value else None
    except ValueError:
        return None


def _coerce_graph(nodes: Sequence[NodeLike], edges: Sequence[EdgeLike],
                  catalog: Optional[NodeCatalog]) -> Graph:
    """Accept model objects or the raw dicts the editor produces."""
    catalog = catalog or NodeCatalog()
    if all(isinstance(n, Node) for n in nodes) and all(isinstance(e, Edge) for e in edges):
        return catalog.classify_graph(Graph(nodes=list(nodes), edges=list(edges)))
    raw = {
        "nodes": [_as_raw_node(n) for n in nodes],
        "edges": [_as_raw_edge(e) for e in edges],
    }
    return graph_from_spec(validate_graph_payload(raw), catalog)


def _as_raw_node(node: NodeLike) -> Dict[str, Any]:
    if isinstance(node, dict):
        return node
    return {
        "id": node.id,
        "data": {
            "type": node.type,
            "label": node.label,
            "logicType": node.logic_type.value if node.logic_type else None,
            "conditions": [
                {"service": c.service, "component": c.component,
                 "function": c.comparator, "value": c.value}
                for c in node.conditions
            ],
        },
    }


def _as_raw_edge(edge: EdgeLike) -> Dict[str, Any]:
    if isinstance(edge, dict):
        return edge
    return {
        "id": edge.id,
        "source": edge.source,
        "target": edge.target,
        "sourceHandle": edge.source_handle,
        "data": {
            "conditionType": edge.condition_type,
            "customLogic": edge.custom_logic,
            "camundaCondition": edge.engine_condition,
            "label": edge.label,
        },
    }


def compile_workflow(nodes: Sequence[NodeLike], edges: Sequence[EdgeLike],
                     catalog: Optional[NodeCatalog] = None) -> WorkflowDocument:
    """
    Compile the editor graph into a workflow document.

    End steps come first (terminal nodes in input order), followed by one
    step per remaining node in input order. Entry and annotation nodes
    produce no step. Raises CompilationError when there is no entry node.
    """
    graph = _coerce_graph(nodes, edges, catalog)

    entry = next((n for n in graph.nodes if n.kind == NodeKind.ENTRY), None)
    if entry is None:
        raise CompilationError("No start node found in the workflow")

    steps: List[Step] = [EndStep(id=n.id) for n in graph.nodes if n.kind == NodeKind.TERMINAL]

    for node in graph.nodes:
        if node.kind in (NodeKind.TERMINAL, NodeKind.ENTRY, NodeKind.ANNOTATION):
            continue

        outgoing = graph.outgoing(node.id)
        parallel = [e for e in outgoing if _is_parallel_target(graph, e.target)]

        if len(parallel) > 1 and not node.is_condition:
            step = _multi_services_step(graph, node, parallel)
        elif node.is_condition:
            step = _condition_step(node, outgoing)
        else:
            step = _service_step(node, outgoing)

        logger.debug("compiled %s step %s", step.type, step.id)
        steps.append(step)

    document = WorkflowDocument(startStep=entry.id, steps=steps)
    document.mark_entry(entry.id)
    return document


def compile_graph(graph: Graph, catalog: Optional[NodeCatalog] = None) -> WorkflowDocument:
    return compile_workflow(graph.nodes, graph.edges, catalog)


def _is_parallel_target(graph: Graph, node_id: str) -> bool:
    target = graph.node(node_id)
    return target is not None and target.kind not in _NON_PARALLEL_KINDS


def _multi_services_step(graph: Graph, node: Node, parallel: List[Edge]) -> MultiServicesStep:
    sub_steps = [e.target for e in parallel]
    return MultiServicesStep(
        id=node.id,
        subSteps=sub_steps,
        goToStep=_convergence_point(graph, sub_steps),
    )


def _convergence_point(graph: Graph, sub_steps: List[str]) -> Optional[str]:
    """
    Majority vote over the direct successors of the sub-steps.
    Ties keep the earliest target that reached the winning count.
    """
    tally: Dict[str, int] = {}
    for sub_step in sub_steps:
        for edge in graph.outgoing(sub_step):
            tally[edge.target] = tally.get(edge.target, 0) + 1

    merge_id = None
    max_count = 0
    for target_id, count in tally.items():
        if count > max_count:
            max_count = count
            merge_id = target_id
    return merge_id


def _condition_step(node: Node, outgoing: List[Edge]) -> ServiceStep:
    match_edge = next((e for e in outgoing if e.source_handle == MATCH_HANDLE), None)
    not_match_edge = next((e for e in outgoing if e.source_handle == NOT_MATCH_HANDLE), None)

    conditions = []
    if match_edge is not None:
        conditions.append(ConditionSpec(
            condition=match_edge.engine_condition or ALWAYS_TRUE,
            goToStep=match_edge.target,
        ))

    return ServiceStep(
        id=node.id,
        service=CONDITION_SERVICE,
        conditions=conditions,
        goToStep=not_match_edge.target if not_match_edge else None,
    )


def _service_step(node: Node, outgoing: List[Edge]) -> ServiceStep:
    conditions = [
        ConditionSpec(condition=render_edge_condition(e), goToStep=e.target)
        for e in outgoing
        if not e.is_default
    ]
    default_edge = next((e for e in outgoing if e.is_default), None)

    return ServiceStep(
        id=node.id,
        service=node.service_identifier,
        conditions=conditions or None,
        goToStep=default_edge.target if default_edge else None,
    )
