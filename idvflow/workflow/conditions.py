""" Rendering of edge conditions into engine expressions, and editor edge defaults. """

from typing import Iterable, Optional, Tuple

from .models import BranchMode, ConditionClause, ConditionType, Edge, Node

# Engine expressions use the ${...} interpolation wrapper
ALWAYS_TRUE = "${true}"
SUCCESS_TRUE = "${result.success == true}"
SUCCESS_FALSE = "${result.success == false}"

# Service name the engine reserves for multi-way condition steps
CONDITION_SERVICE = "condition"

_DEFAULT_CONNECTION = (ConditionType.MATCH.value, "Connection")

_BRANCH_CONNECTIONS = {
    BranchMode.SUCCESS: (ConditionType.SUCCESS.value, "On Success"),
    BranchMode.FAILED: (ConditionType.FAILURE.value, "On Failure"),
    BranchMode.CONDITIONAL: (ConditionType.CONDITION.value, "If Condition Met"),
    BranchMode.INDECISIVE: (ConditionType.REVIEW.value, "On Review"),
    BranchMode.CUSTOM: (ConditionType.CUSTOM.value, "Custom Path"),
}


def wrap_expression(text: str) -> str:
    return "${" + text + "}"


def render_edge_condition(edge: Edge) -> str:
    """
    Engine expression for a conditional edge.

    A pre-rendered engine condition always wins; otherwise the coarse
    condition tag is mapped to a fixed expression.
    """
    if edge.engine_condition:
        return edge.engine_condition
    if edge.condition_type == ConditionType.MATCH.value:
        return SUCCESS_TRUE
    if edge.condition_type == ConditionType.NOMATCH.value:
        return SUCCESS_FALSE
    if edge.condition_type == ConditionType.CUSTOM.value and edge.custom_logic:
        return wrap_expression(edge.custom_logic)
    return ALWAYS_TRUE


def default_connection(source: Optional[Node]) -> Tuple[str, str]:
    """
    Condition type and label given to a freshly drawn edge leaving `source`.
    Only ConditionalLogic branches label their edges after their mode.
    """
    if source is None or source.type != "ConditionalLogic":
        return _DEFAULT_CONNECTION
    return _BRANCH_CONNECTIONS.get(source.logic_type, _DEFAULT_CONNECTION)


def condition_label(clauses: Iterable[ConditionClause]) -> str:
    return "\n".join(f"{c.service} {c.comparator} {c.value}" for c in clauses)
