"""Tests for exporting editor graphs as Camunda workflow JSON."""

import json
from pathlib import Path

import pytest
from idvflow.integrations.camunda.export import (
    WorkflowValidationError, graph_file_to_camunda_json, graph_to_camunda,
)
from idvflow.workflow.compiler import CompilationError, load_graph

EXAMPLE_GRAPH = Path(__file__).resolve().parent.parent / "examples" / "id_verification_graph.json"


def test_export_example_graph(tmp_path):
    """The bundled example compiles, validates and is written as JSON."""
    out = tmp_path / "workflow.json"

    workflow = graph_file_to_camunda_json(EXAMPLE_GRAPH, out)

    assert json.loads(out.read_text()) == workflow
    assert workflow["startStep"] == "start-1"
    assert workflow["steps"][:2] == [
        {"type": "end", "id": "end-ok"},
        {"type": "end", "id": "end-reject"},
    ]
    steps = {s["id"]: s for s in workflow["steps"]}
    assert "note-1" not in steps
    assert steps["webapp-1"] == {
        "type": "multi_services",
        "id": "webapp-1",
        "subSteps": ["idv-1", "liveness-1"],
        "goToStep": "facecompare-1",
    }
    assert steps["condition-1"] == {
        "type": "service",
        "id": "condition-1",
        "service": "condition",
        "conditions": [{"condition": "${result.faceMatch > 0.8}", "goToStep": "aml-1"}],
        "goToStep": "end-reject",
    }
    assert steps["aml-1"] == {
        "type": "service",
        "id": "aml-1",
        "service": "aml",
        "conditions": [{"condition": "${result.success == false}", "goToStep": "end-reject"}],
        "goToStep": "end-ok",
    }


def test_export_yaml_graph(tmp_path):
    """YAML graph files are accepted too."""
    source = tmp_path / "graph.yaml"
    source.write_text("""
nodes:
  - { id: e1, data: { type: StartNode } }
  - { id: s1, data: { type: PII } }
  - { id: t1, data: { type: EndNode } }
edges:
  - { id: a, source: e1, target: s1 }
  - { id: b, source: s1, target: t1 }
""")
    out = tmp_path / "workflow.json"

    graph_file_to_camunda_json(source, out)

    assert json.loads(out.read_text()) == {
        "startStep": "e1",
        "steps": [
            {"type": "end", "id": "t1"},
            {"type": "service", "id": "s1", "service": "pii", "goToStep": "t1"},
        ],
    }


def test_export_blocked_by_validation_errors():
    """Nothing is written while the validator reports errors."""
    graph = load_graph("""
nodes:
  - { id: e1, data: { type: StartNode } }
  - { id: s1, data: { type: IDV } }
edges:
  - { id: a, source: e1, target: s1 }
  - { id: b, source: s1, target: gone, data: { conditionType: match } }
""")

    with pytest.raises(WorkflowValidationError) as excinfo:
        graph_to_camunda(graph)

    assert excinfo.value.errors == [
        "Connection b references unknown node gone",
        "Found 1 steps with conditions but no default goToStep",
        "Step s1 has a condition referencing non-existent goToStep gone",
    ]
    assert "Workflow validation failed" in str(excinfo.value)


def test_export_blocked_by_second_start_node():
    """Two start nodes compile, but the export refuses them."""
    graph = load_graph("""
nodes:
  - { id: e1, data: { type: StartNode } }
  - { id: s1, data: { type: IDV } }
  - { id: e2, data: { type: StartNode } }
  - { id: s2, data: { type: AML } }
  - { id: t1, data: { type: EndNode } }
edges:
  - { id: a, source: e1, target: s1 }
  - { id: b, source: s1, target: t1 }
  - { id: c, source: e2, target: s2 }
  - { id: d, source: s2, target: t1 }
""")

    with pytest.raises(WorkflowValidationError) as excinfo:
        graph_to_camunda(graph)

    assert excinfo.value.errors == ["Expected exactly one start node, found 2"]


def test_export_blocked_by_start_node_with_incoming_edge():
    """A connection back into the start node blocks the export."""
    graph = load_graph("""
nodes:
  - { id: e1, data: { type: StartNode } }
  - { id: s1, data: { type: IDV } }
  - { id: t1, data: { type: EndNode } }
edges:
  - { id: a, source: e1, target: s1 }
  - { id: b, source: s1, target: t1 }
  - { id: c, source: s1, target: e1, data: { conditionType: nomatch } }
""")

    with pytest.raises(WorkflowValidationError) as excinfo:
        graph_to_camunda(graph)

    assert excinfo.value.errors == [
        "Start node e1 must not have incoming connections",
        "Step s1 has a condition referencing non-existent goToStep e1",
    ]


def test_export_without_start_node(tmp_path):
    """The compiler's fatal error propagates and no file is created."""
    source = tmp_path / "graph.json"
    source.write_text('{"nodes": [{"id": "s1", "data": {"type": "IDV"}}], "edges": []}')
    out = tmp_path / "workflow.json"

    with pytest.raises(CompilationError):
        graph_file_to_camunda_json(source, out)
    assert not out.exists()
