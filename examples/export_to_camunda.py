""" Example: compile an editor graph export into Camunda workflow JSON. """
import logging
import sys
from pathlib import Path

from idvflow.integrations.camunda.export import WorkflowValidationError, graph_file_to_camunda_json


def main():
    graph_path = sys.argv[1] if len(sys.argv) > 1 else "workflow.json"
    out_json_path = sys.argv[2] if len(sys.argv) > 2 else "workflow_camunda.json"
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        graph_file_to_camunda_json(Path(graph_path), Path(out_json_path))
    except WorkflowValidationError as e:
        for error in e.errors:
            print(f"- {error}")
        sys.exit(1)
    print(f"Wrote Camunda workflow JSON to: {out_json_path}")



if __name__ == '__main__':
    main()
