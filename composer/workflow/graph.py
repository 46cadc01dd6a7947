"""Workflow graph with index-based edges and structural validation."""

from collections import defaultdict
from typing import Dict, Iterator, List, Optional, Set

import networkx as nx
import structlog

from composer.errors import GraphValidationError
from composer.workflow.models import Connection, WorkflowNode

logger = structlog.get_logger(__name__)


class WorkflowGraph:
    """Arena of workflow nodes plus the connections between them.

    Nodes are addressed by their position in the arena; insertion order is
    execution order and node 0 is the trigger. Names are only needed when the
    graph is rendered.
    """

    def __init__(self, name: str = "workflow"):
        self.name = name
        self._nodes: List[WorkflowNode] = []
        self._connections: List[Connection] = []
        self._names: Dict[str, int] = {}
        self._adjacency: Dict[int, List[int]] = defaultdict(list)
        self._reverse_adjacency: Dict[int, List[int]] = defaultdict(list)

    @property
    def nodes(self) -> List[WorkflowNode]:
        return list(self._nodes)

    @property
    def connections(self) -> List[Connection]:
        return list(self._connections)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[WorkflowNode]:
        return iter(self._nodes)

    def add_node(self, node: WorkflowNode) -> int:
        """Add a node and return its index."""
        if node.name in self._names:
            raise GraphValidationError(f"Node name '{node.name}' already exists")

        index = len(self._nodes)
        self._nodes.append(node)
        self._names[node.name] = index
        return index

    def connect(self, source: int, target: int, output_index: int = 0, input_index: int = 0) -> Connection:
        """Add a connection between two existing nodes."""
        for index in (source, target):
            if not 0 <= index < len(self._nodes):
                raise GraphValidationError(f"Node index {index} not found")
        if source == target:
            raise GraphValidationError(f"Node '{self._nodes[source].name}' cannot connect to itself")

        connection = Connection(source, target, output_index, input_index)
        if connection not in self._connections:
            self._connections.append(connection)
            self._adjacency[source].append(target)
            self._reverse_adjacency[target].append(source)
        return connection

    def node(self, index: int) -> WorkflowNode:
        return self._nodes[index]

    def index_of(self, name: str) -> Optional[int]:
        """Get a node index by name."""
        return self._names.get(name)

    def successors(self, index: int) -> List[int]:
        return list(self._adjacency.get(index, []))

    def predecessors(self, index: int) -> List[int]:
        return list(self._reverse_adjacency.get(index, []))

    def in_degree(self, index: int) -> int:
        return len(self._reverse_adjacency.get(index, []))

    def roots(self) -> List[int]:
        """Indices of nodes without incoming connections."""
        return [i for i in range(len(self._nodes)) if self.in_degree(i) == 0]

    def outgoing(self, index: int) -> List[Connection]:
        return [c for c in self._connections if c.source == index]

    def to_networkx(self) -> nx.DiGraph:
        """Convert to NetworkX graph keyed by node index."""
        graph = nx.DiGraph()
        for index, node in enumerate(self._nodes):
            graph.add_node(index, name=node.name, type=node.type_id)
        for connection in self._connections:
            graph.add_edge(
                connection.source,
                connection.target,
                output_index=connection.output_index,
                input_index=connection.input_index,
            )
        return graph

    def validate(self) -> None:
        """Check the trigger, reachability and acyclicity invariants."""
        if not self._nodes:
            raise GraphValidationError("Workflow graph has no nodes")

        roots = self.roots()
        if roots != [0]:
            names = [self._nodes[i].name for i in roots]
            raise GraphValidationError(f"Expected the trigger to be the only entry node, found: {names}")

        graph = self.to_networkx()
        if not nx.is_directed_acyclic_graph(graph):
            cycle = [self._nodes[i].name for i, _ in nx.find_cycle(graph)]
            raise GraphValidationError(f"Cycle detected: {' -> '.join(cycle)}")

        reachable: Set[int] = nx.descendants(graph, 0) | {0}
        unreachable = [self._nodes[i].name for i in range(len(self._nodes)) if i not in reachable]
        if unreachable:
            raise GraphValidationError(f"Nodes not reachable from the trigger: {unreachable}")

        logger.debug("graph_validated", name=self.name, nodes=len(self._nodes), connections=len(self._connections))
