"""Tests for the node-type catalogue."""

import pytest
from idvflow.workflow.catalog import NodeCatalog, load_catalog, load_catalog_file
from idvflow.workflow.compiler import compile_workflow
from idvflow.workflow.models import NodeKind


def test_default_kinds():
    """Built-in editor types are classified, unknown types are services."""
    catalog = NodeCatalog()

    assert catalog.kind_of("StartNode") == NodeKind.ENTRY
    assert catalog.kind_of("EndNode") == NodeKind.TERMINAL
    assert catalog.kind_of("TextNode") == NodeKind.ANNOTATION
    assert catalog.kind_of("Condition") == NodeKind.BRANCH
    assert catalog.kind_of("IDV") == NodeKind.SERVICE
    assert catalog.kind_of("SomethingNew") == NodeKind.SERVICE
    assert catalog.single_instance_types == frozenset({"WebApp"})


def test_load_catalog_overrides_listed_types():
    """YAML overrides apply to listed types and leave the rest alone."""
    catalog = load_catalog("""
annotation: [StickyNote]
terminal: [Reject]
single_instance: [WebApp, KYB]
""")

    assert catalog.kind_of("StickyNote") == NodeKind.ANNOTATION
    assert catalog.kind_of("Reject") == NodeKind.TERMINAL
    assert catalog.kind_of("EndNode") == NodeKind.TERMINAL
    assert catalog.single_instance_types == frozenset({"WebApp", "KYB"})


def test_load_catalog_empty_document_keeps_defaults():
    """An empty file is the default catalogue."""
    assert load_catalog("").kinds == NodeCatalog().kinds


def test_load_catalog_rejects_unknown_kind():
    """Only the known node kinds can be configured."""
    with pytest.raises(ValueError, match="Unknown node kind in catalog: widget"):
        load_catalog("widget: [Foo]")


def test_load_catalog_rejects_duplicate_type():
    """A type cannot belong to two kinds."""
    with pytest.raises(ValueError, match="listed under both"):
        load_catalog("service: [Foo]\nterminal: [Foo]")


def test_load_catalog_rejects_non_list_entry():
    """Each kind maps to a list."""
    with pytest.raises(ValueError, match="must be a list"):
        load_catalog("service: Foo")


def test_load_catalog_file(tmp_path):
    """Catalogues can be read from disk."""
    path = tmp_path / "catalog.yaml"
    path.write_text("entry: [Trigger]\n")

    assert load_catalog_file(path).kind_of("Trigger") == NodeKind.ENTRY


def test_compile_with_custom_catalog():
    """The compiler classifies nodes through the catalogue it is given."""
    catalog = load_catalog("entry: [Trigger]\nannotation: [StickyNote]")
    nodes = [
        {"id": "go", "data": {"type": "Trigger"}},
        {"id": "memo", "data": {"type": "StickyNote"}},
        {"id": "s1", "data": {"type": "Biometrics"}},
        {"id": "t1", "data": {"type": "EndNode"}},
    ]
    edges = [{"id": "1", "source": "go", "target": "s1"}, {"id": "2", "source": "s1", "target": "t1"}]

    document = compile_workflow(nodes, edges, catalog=catalog).to_dict()

    assert document["startStep"] == "go"
    assert document["steps"] == [
        {"type": "end", "id": "t1"},
        {"type": "service", "id": "s1", "service": "biometrics", "goToStep": "t1"},
    ]
