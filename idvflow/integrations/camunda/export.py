""" Export editor graphs as Camunda workflow JSON, blocked on graph or document errors. """

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from idvflow.workflow.catalog import NodeCatalog
from idvflow.workflow.compiler import compile_graph, load_graph
from idvflow.workflow.graph_checks import check_graph
from idvflow.workflow.models import Graph
from idvflow.workflow.validator import validate_document

logger = logging.getLogger(__name__)


class WorkflowValidationError(ValueError):
    """The compiled workflow has structural errors and must not be exported."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Workflow validation failed: " + "; ".join(self.errors))


def graph_to_camunda(graph: Graph, catalog: Optional[NodeCatalog] = None) -> Dict[str, Any]:
    """
    Compile a graph into the engine's JSON shape.

    Export is blocked while the editor checks or the validator report
    anything; graph problems are listed before document problems. A graph
    without a start node still fails with CompilationError.
    """
    document = compile_graph(graph, catalog)
    errors = check_graph(graph, catalog) + validate_document(document)
    if errors:
        raise WorkflowValidationError(errors)
    return document.to_dict()


def graph_file_to_camunda_json(graph_path: Path, json_path: Path,
                               catalog: Optional[NodeCatalog] = None) -> Dict[str, Any]:
    """
    Load an editor graph export (JSON or YAML), compile it, validate it and
    write the workflow JSON.
    """
    graph = load_graph(Path(graph_path).read_text(), catalog)
    workflow = graph_to_camunda(graph, catalog)
    Path(json_path).write_text(json.dumps(workflow, indent=2))
    logger.info("Wrote Camunda workflow to %s", json_path)
    return workflow
