""" Structural checks on a compiled workflow document. """

import logging
from typing import Any, Dict, List, Union

from .schema import WorkflowDocument

logger = logging.getLogger(__name__)


def validate_document(document: Union[WorkflowDocument, Dict[str, Any]]) -> List[str]:
    """
    Check a workflow document for missing ids, missing services, conditional
    steps without a fallback and references to steps that do not exist.

    Returns human-readable errors in a stable order; an empty list means the
    document can be handed to the engine. Never raises.
    """
    known_ids = set()
    if isinstance(document, WorkflowDocument):
        if document.entry_step:
            known_ids.add(document.entry_step)
        raw = document.to_dict()
    else:
        raw = document

    if not isinstance(raw, dict) or not isinstance(raw.get("steps", []), list):
        return ["Invalid workflow document: expected a mapping with a list of steps"]

    steps = [s for s in raw.get("steps", []) if isinstance(s, dict)]
    if len(steps) != len(raw.get("steps", [])):
        return ["Invalid workflow document: every step must be a mapping"]

    errors: List[str] = []

    missing_ids = [s for s in steps if not s.get("id")]
    if missing_ids:
        errors.append(f"Found {len(missing_ids)} steps without IDs")

    missing_service = [s for s in steps if s.get("type") == "service" and not s.get("service")]
    if missing_service:
        errors.append(f"Found {len(missing_service)} service steps without a service type")

    no_default = [s for s in steps if s.get("conditions") and not s.get("goToStep")]
    if no_default:
        errors.append(f"Found {len(no_default)} steps with conditions but no default goToStep")

    step_ids = {s["id"] for s in steps if isinstance(s.get("id"), str)}

    def exists(ref: Any) -> bool:
        return isinstance(ref, str) and ref in step_ids

    start_step = raw.get("startStep")
    if not exists(start_step) and not (isinstance(start_step, str) and start_step in known_ids):
        errors.append(f"Start step {start_step} does not exist in the workflow")

    for step in steps:
        step_id = step.get("id")
        go_to = step.get("goToStep")
        if go_to and not exists(go_to):
            errors.append(f"Step {step_id} references non-existent goToStep {go_to}")

        for condition in _as_list(step.get("conditions")):
            target = condition.get("goToStep") if isinstance(condition, dict) else None
            if not exists(target):
                errors.append(
                    f"Step {step_id} has a condition referencing non-existent goToStep {target}"
                )

        if step.get("type") == "multi_services":
            for sub_step in _as_list(step.get("subSteps")):
                if not exists(sub_step):
                    errors.append(
                        f"Multi-service step {step_id} references non-existent subStep {sub_step}"
                    )

    if errors:
        logger.debug("workflow document has %d validation errors", len(errors))
    return errors


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []
