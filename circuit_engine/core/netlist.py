"""
Circuit netlist: the component/connection records handed over by the editor
and the resolution of component terminals into electrical nodes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, List, Optional, Tuple

from networkx.utils import UnionFind

from ..config import COMPONENT_TERMINALS, DEFAULT_AC_MAGNITUDES, DEFAULT_COMPONENT_VALUES, GROUND_NODE
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

TerminalKey = Tuple[Hashable, int]

# Sentinel member of the union-find that every ground terminal joins
_GROUND_KEY = ("<ground>", -1)


def _to_float(value: Any, what: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{what} must be a number, got {value!r}") from None


@dataclass(frozen=True)
class Component:
    """A placed component as described by the editor."""
    id: Hashable
    type: str
    value: float
    label: str = ""
    ac_magnitude: float = 0.0

    @property
    def terminal_count(self) -> int:
        return COMPONENT_TERMINALS.get(self.type, 2)

    @property
    def is_ground(self) -> bool:
        return self.type == "ground"

    @property
    def display_name(self) -> str:
        return self.label or self.type

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Component":
        if not isinstance(data, dict) or "id" not in data or "type" not in data:
            raise ValidationError(f"Component description needs 'id' and 'type': {data!r}")

        comp_type = str(data["type"])
        value = data.get("value")
        if value is None:
            value = DEFAULT_COMPONENT_VALUES.get(comp_type, 0.0)

        ac_magnitude = data.get("acMagnitude", data.get("ac_magnitude"))
        if ac_magnitude is None:
            ac_magnitude = DEFAULT_AC_MAGNITUDES.get(comp_type, 0.0)

        return cls(
            id=data["id"],
            type=comp_type,
            value=_to_float(value, f"Value of component '{data['id']}'"),
            label=str(data.get("label") or ""),
            ac_magnitude=_to_float(ac_magnitude, f"AC magnitude of component '{data['id']}'"),
        )


@dataclass(frozen=True)
class TerminalRef:
    component_id: Hashable
    terminal: int

    @property
    def key(self) -> TerminalKey:
        return (self.component_id, self.terminal)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TerminalRef":
        try:
            return cls(data["componentId"], int(data["terminal"]))
        except (KeyError, TypeError, ValueError):
            raise ValidationError(f"Malformed connection endpoint: {data!r}") from None


@dataclass(frozen=True)
class Connection:
    """A wire between two component terminals; the order of the ends is irrelevant."""
    start: TerminalRef
    end: TerminalRef

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Connection":
        if not isinstance(data, dict) or "from" not in data or "to" not in data:
            raise ValidationError(f"Connection needs 'from' and 'to' endpoints: {data!r}")
        return cls(TerminalRef.from_dict(data["from"]), TerminalRef.from_dict(data["to"]))


@dataclass
class NodeMap:
    """Result of node resolution."""
    terminal_nodes: Dict[TerminalKey, int]
    num_nodes: int  # Includes the reference node 0

    def node_of(self, component_id: Hashable, terminal: int) -> int:
        return self.terminal_nodes[(component_id, terminal)]

    def nodes_of(self, component: Component) -> Tuple[int, ...]:
        return tuple(self.node_of(component.id, idx) for idx in range(component.terminal_count))

    @property
    def num_unknown_nodes(self) -> int:
        return max(self.num_nodes - 1, 0)

    def to_dict(self, components: Iterable[Component]) -> Dict[Hashable, List[int]]:
        return {comp.id: list(self.nodes_of(comp)) for comp in components}


class CircuitNetlist:
    """Immutable view of the circuit under analysis."""

    def __init__(self, components: Iterable[Any], connections: Optional[Iterable[Any]] = None):
        self.components: List[Component] = [
            comp if isinstance(comp, Component) else Component.from_dict(comp)
            for comp in (components or [])
        ]
        self.connections: List[Connection] = [
            conn if isinstance(conn, Connection) else Connection.from_dict(conn)
            for conn in (connections or [])
        ]
        self._by_id = {comp.id: comp for comp in self.components}

    def get_component(self, component_id: Hashable) -> Optional[Component]:
        return self._by_id.get(component_id)

    def ground_components(self) -> List[Component]:
        return [comp for comp in self.components if comp.is_ground]

    def has_ground(self) -> bool:
        return any(comp.is_ground for comp in self.components)

    def __repr__(self):
        return f"CircuitNetlist(components={len(self.components)}, connections={len(self.connections)})"


class NodeMapper:
    """
    Resolves which component terminals are electrically identical.

    Ground terminals form node 0. Connections merge terminal classes through a
    union-find; surviving classes are numbered 1, 2, ... in order of first
    appearance along the connection list. A terminal that no connection
    touches gets its own node and is never tied to ground implicitly.
    """

    def __init__(self, netlist: CircuitNetlist):
        self.netlist = netlist

    def map_nodes(self) -> NodeMap:
        self._check_connections()

        classes = UnionFind()
        classes.union(_GROUND_KEY)
        for comp in self.netlist.ground_components():
            for idx in range(comp.terminal_count):
                classes.union(_GROUND_KEY, (comp.id, idx))

        for conn in self.netlist.connections:
            classes.union(conn.start.key, conn.end.key)

        root_ids = {classes[_GROUND_KEY]: GROUND_NODE}
        next_id = GROUND_NODE + 1
        for conn in self.netlist.connections:
            for key in (conn.start.key, conn.end.key):
                root = classes[key]
                if root not in root_ids:
                    root_ids[root] = next_id
                    next_id += 1

        terminal_nodes = {}
        floating = 0
        for comp in self.netlist.components:
            for idx in range(comp.terminal_count):
                key = (comp.id, idx)
                if key in classes.parents:
                    terminal_nodes[key] = root_ids[classes[key]]
                else:
                    terminal_nodes[key] = next_id
                    next_id += 1
                    floating += 1

        if floating:
            logger.debug(f"{floating} unconnected terminal(s) received their own node")
        logger.debug(f"Node mapping resolved {next_id} nodes (including reference)")

        return NodeMap(terminal_nodes=terminal_nodes, num_nodes=next_id)

    def _check_connections(self):
        for conn in self.netlist.connections:
            for ref in (conn.start, conn.end):
                comp = self.netlist.get_component(ref.component_id)
                if comp is None:
                    raise ValidationError(f"Connection references unknown component '{ref.component_id}'")
                if not 0 <= ref.terminal < comp.terminal_count:
                    raise ValidationError(
                        f"Component '{comp.id}' has no terminal {ref.terminal} "
                        f"(it has {comp.terminal_count})"
                    )
