""" Pydantic shapes of the editor graph payload and of the engine workflow document. """

import json
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError


# ---------------------------------------------------------------------------
# Editor graph payload (nodes + edges as the canvas hands them over)
# ---------------------------------------------------------------------------

class ConditionClauseSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    service: str = ""
    component: str = ""
    comparator: str = Field(default="", alias="function")
    value: str = ""


class NodeDataSpec(BaseModel):
    model_config = ConfigDict(extra="allow")  # per-type config, validity flags, fonts, ...

    type: str
    label: str = ""
    logicType: Optional[str] = None
    conditions: List[ConditionClauseSpec] = Field(default_factory=list)


class NodeSpec(BaseModel):
    model_config = ConfigDict(extra="ignore")  # position, dimensions, selection state

    id: str
    data: NodeDataSpec


class EdgeDataSpec(BaseModel):
    model_config = ConfigDict(extra="allow")

    conditionType: Optional[str] = None
    customLogic: Optional[str] = None
    camundaCondition: Optional[str] = None
    label: Optional[str] = None


class EdgeSpec(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    source: str
    target: str
    sourceHandle: Optional[str] = None
    data: Optional[EdgeDataSpec] = None


class GraphSpec(BaseModel):
    nodes: List[NodeSpec]
    edges: List[EdgeSpec]


# ---------------------------------------------------------------------------
# Workflow document consumed by the process engine
# ---------------------------------------------------------------------------

class ConditionSpec(BaseModel):
    condition: str
    goToStep: str


class EndStep(BaseModel):
    type: Literal["end"] = "end"
    id: str


class ServiceStep(BaseModel):
    type: Literal["service"] = "service"
    id: str
    service: str
    conditions: Optional[List[ConditionSpec]] = None
    goToStep: Optional[str] = None


class MultiServicesStep(BaseModel):
    type: Literal["multi_services"] = "multi_services"
    id: str
    subSteps: List[str] = Field(default_factory=list)
    goToStep: Optional[str] = None


Step = Annotated[Union[EndStep, ServiceStep, MultiServicesStep], Field(discriminator="type")]


class WorkflowDocument(BaseModel):
    startStep: str
    steps: List[Step] = Field(default_factory=list)

    # Entry node id recorded by the compiler. The entry is the engine's trigger
    # and has no step of its own; never serialised.
    _entry_step: Optional[str] = PrivateAttr(default=None)

    @property
    def entry_step(self) -> Optional[str]:
        return self._entry_step

    def mark_entry(self, node_id: str) -> None:
        self._entry_step = node_id

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict; unset optional fields are left out."""
        return self.model_dump(exclude_none=True)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def validate_graph_payload(raw: Dict[str, Any]) -> GraphSpec:
    """Validate a raw editor payload against GraphSpec."""
    try:
        return GraphSpec.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Graph validation error: {e}")


def validate_document_payload(raw: Dict[str, Any]) -> WorkflowDocument:
    """Parse a raw workflow document (e.g. a previously exported JSON file)."""
    try:
        return WorkflowDocument.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Workflow document validation error: {e}")
