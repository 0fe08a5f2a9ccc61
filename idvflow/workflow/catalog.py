""" Node-type catalogue: which editor types are entries, terminals, branches or notes. """

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, FrozenSet, Optional

import yaml

from .models import Graph, Node, NodeKind


DEFAULT_KINDS: Dict[str, NodeKind] = {
    "StartNode": NodeKind.ENTRY,
    "EndNode": NodeKind.TERMINAL,
    "DescriptionBox": NodeKind.ANNOTATION,
    "TextNode": NodeKind.ANNOTATION,
    "ConditionalLogic": NodeKind.BRANCH,
    "Condition": NodeKind.BRANCH,
    # identity-verification services
    "WebApp": NodeKind.SERVICE,
    "IDV": NodeKind.SERVICE,
    "Media": NodeKind.SERVICE,
    "PII": NodeKind.SERVICE,
    "POA": NodeKind.SERVICE,
    "AnyDoc": NodeKind.SERVICE,
    "AgeEstimation": NodeKind.SERVICE,
    "Liveness": NodeKind.SERVICE,
    "FaceCompare": NodeKind.SERVICE,
    "OBI": NodeKind.SERVICE,
    "AML": NodeKind.SERVICE,
    "KYB": NodeKind.SERVICE,
}

DEFAULT_SINGLE_INSTANCE: FrozenSet[str] = frozenset({"WebApp"})


@dataclass
class NodeCatalog:
    kinds: Dict[str, NodeKind] = field(default_factory=lambda: dict(DEFAULT_KINDS))
    single_instance_types: FrozenSet[str] = DEFAULT_SINGLE_INSTANCE

    def kind_of(self, type_name: str) -> NodeKind:
        # Unknown types are treated as plain services
        return self.kinds.get(type_name, NodeKind.SERVICE)

    def classify(self, node: Node) -> Node:
        """Return `node` with its kind filled in, unless the caller already set one."""
        if node.kind is not None:
            return node
        return replace(node, kind=self.kind_of(node.type))

    def classify_graph(self, graph: Graph) -> Graph:
        return Graph(nodes=[self.classify(n) for n in graph.nodes], edges=list(graph.edges))


def load_catalog(yaml_text: str, base: Optional[NodeCatalog] = None) -> NodeCatalog:
    """
    Load a catalogue override from YAML.

    The document maps kind names to lists of editor types, e.g.::

        service: [Biometrics]
        annotation: [StickyNote]
        single_instance: [WebApp]

    Listed types override the defaults; everything else keeps its default kind.
    """
    data = yaml.safe_load(yaml_text) or {}
    if not isinstance(data, dict):
        raise ValueError("Catalog must be a mapping of kind -> list of types")

    base = base or NodeCatalog()
    kinds = dict(base.kinds)
    single_instance = base.single_instance_types
    seen: Dict[str, str] = {}

    for key, types in data.items():
        if not isinstance(types, list):
            raise ValueError(f"Catalog entry '{key}' must be a list of types")
        if key == "single_instance":
            single_instance = frozenset(str(t) for t in types)
            continue
        try:
            kind = NodeKind(key)
        except ValueError:
            raise ValueError(f"Unknown node kind in catalog: {key}")
        for type_name in types:
            type_name = str(type_name)
            if type_name in seen:
                raise ValueError(
                    f"Type {type_name} listed under both '{seen[type_name]}' and '{key}'"
                )
            seen[type_name] = key
            kinds[type_name] = kind

    return NodeCatalog(kinds=kinds, single_instance_types=single_instance)


def load_catalog_file(path: Path) -> NodeCatalog:
    return load_catalog(Path(path).read_text())
