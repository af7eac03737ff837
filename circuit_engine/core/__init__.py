from .mna import MNASolution, MNASystem, SystemBuilder
from .netlist import CircuitNetlist, Component, Connection, NodeMap, NodeMapper, TerminalRef
from .simulator import CircuitSimulator, analyze_spectrum, simulate_circuit
from .solver import LinearSolver, solve_linear_system
from .validation import CircuitValidator
