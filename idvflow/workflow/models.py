""" Data models for the service graph drawn in the editor """

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class NodeKind(str, Enum):
    ENTRY = "entry"
    TERMINAL = "terminal"
    SERVICE = "service"
    BRANCH = "branch"
    ANNOTATION = "annotation"


class BranchMode(str, Enum):
    SUCCESS = "Success"
    FAILED = "Failed"
    CONDITIONAL = "Conditional"
    INDECISIVE = "Indecisive"
    CUSTOM = "Custom"


class ConditionType(str, Enum):
    MATCH = "match"
    NOMATCH = "nomatch"
    ALWAYS = "always"
    CUSTOM = "custom"
    SUCCESS = "success"
    FAILURE = "failure"
    CONDITION = "condition"
    REVIEW = "review"


# Editor type name of the multi-way branch node with "match"/"notMatch" ports
CONDITION_NODE_TYPE = "Condition"
MATCH_HANDLE = "match"
NOT_MATCH_HANDLE = "notMatch"


@dataclass
class ConditionClause:
    service: str = ""
    component: str = ""
    comparator: str = ""
    value: str = ""


@dataclass
class Node:
    id: str
    type: str
    kind: Optional[NodeKind] = None  # resolved from the catalogue when unset
    label: str = ""
    logic_type: Optional[BranchMode] = None
    conditions: List[ConditionClause] = field(default_factory=list)

    @property
    def service_identifier(self) -> str:
        return self.type.lower()

    @property
    def is_condition(self) -> bool:
        """True for the multi-way branch node that routes on named ports."""
        return self.kind == NodeKind.BRANCH and self.type == CONDITION_NODE_TYPE


@dataclass
class Edge:
    id: str
    source: str
    target: str
    source_handle: Optional[str] = None
    condition_type: Optional[str] = None  # unset means default continuation
    custom_logic: Optional[str] = None
    engine_condition: Optional[str] = None
    label: str = ""

    @property
    def is_default(self) -> bool:
        return not self.condition_type or self.condition_type == ConditionType.ALWAYS.value


@dataclass
class Graph:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def node(self, node_id: str) -> Optional[Node]:
        return next((n for n in self.nodes if n.id == node_id), None)

    def outgoing(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.source == node_id]

    def incoming(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.target == node_id]
