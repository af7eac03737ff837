"""
Circuit validation run before any analysis.

Errors abort the analysis with a ValidationError; warnings are handed back to
the caller together with the results.
"""

import logging
from typing import List

import networkx as nx

from ..components import COMPONENT_MODELS
from ..config import GROUND_NODE
from ..exceptions import UnsupportedComponentError, ValidationError
from .netlist import CircuitNetlist, NodeMap

logger = logging.getLogger(__name__)

_POSITIVE_VALUES = {
    "resistor": "resistance",
    "capacitor": "capacitance",
    "inductor": "inductance",
}


class CircuitValidator:
    """Circuit validation and error detection"""

    def __init__(self, netlist: CircuitNetlist):
        self.netlist = netlist
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_circuit(self) -> List[str]:
        """Raise ValidationError on the first class of fatal problems, return warnings otherwise."""
        self.errors.clear()
        self.warnings.clear()

        if not self.netlist.components:
            raise ValidationError("No components in circuit")

        self._validate_component_types()
        self._validate_unique_ids()
        if not self.netlist.has_ground():
            self.errors.append("Circuit must contain at least one ground component")
        self._validate_components()

        if self.errors:
            raise ValidationError("; ".join(self.errors))

        return list(self.warnings)

    def _validate_component_types(self):
        # Unknown kinds are rejected rather than skipped
        for comp in self.netlist.components:
            if comp.type not in COMPONENT_MODELS:
                raise UnsupportedComponentError(comp.id, comp.type)

    def _validate_unique_ids(self):
        seen = set()
        for comp in self.netlist.components:
            if comp.id in seen:
                self.errors.append(f"Duplicate component id '{comp.id}'")
            seen.add(comp.id)

    def _validate_components(self):
        """Validate individual component values"""
        for comp in self.netlist.components:
            quantity = _POSITIVE_VALUES.get(comp.type)
            if quantity and comp.value <= 0:
                self.errors.append(f"{comp.type.capitalize()} '{comp.id}' has invalid {quantity}: {comp.value}")
            elif comp.type == "resistor" and comp.value < 1e-6:
                self.warnings.append(f"Resistor '{comp.id}' has very small resistance: {comp.value}")

    def connectivity_warnings(self, node_map: NodeMap) -> List[str]:
        """Report components and sub-networks that have no path to ground."""
        warnings = []
        graph = nx.Graph()
        graph.add_nodes_from(range(node_map.num_nodes))

        connected_terminals = set()
        for conn in self.netlist.connections:
            connected_terminals.add(conn.start.key)
            connected_terminals.add(conn.end.key)

        for comp in self.netlist.components:
            nodes = node_map.nodes_of(comp)
            if len(nodes) == 2:
                graph.add_edge(*nodes)
            if not comp.is_ground and not any((comp.id, idx) in connected_terminals for idx in range(len(nodes))):
                warnings.append(f"Component '{comp.id}' is not connected")

        grounded = nx.node_connected_component(graph, GROUND_NODE)
        floating = sorted(node for node in graph.nodes if node not in grounded)
        if floating:
            warnings.append(f"Nodes {floating} have no path to ground")

        for message in warnings:
            logger.warning(message)
        return warnings
