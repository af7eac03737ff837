"""
Small circuits shared by the test modules.

Node numbers follow the order in which wires first touch a terminal, so
every builder documents the nodes it produces.
"""


def wire(a, ta, b, tb):
    return {"from": {"componentId": a, "terminal": ta}, "to": {"componentId": b, "terminal": tb}}


def series_resistor(voltage=12.0, resistance=1000.0):
    """V1 -> R1 -> ground. Node 1 is the top of R1."""
    components = [
        {"id": "V1", "type": "voltage_source", "value": voltage},
        {"id": "R1", "type": "resistor", "value": resistance},
        {"id": "GND", "type": "ground"},
    ]
    connections = [
        wire("V1", 0, "R1", 0),
        wire("R1", 1, "GND", 0),
        wire("V1", 1, "GND", 0),
    ]
    return components, connections


def parallel_resistors(voltage=12.0, resistance=1000.0):
    """V1 across R1 and R2 in parallel. Node 1 is the common top node."""
    components = [
        {"id": "V1", "type": "voltage_source", "value": voltage},
        {"id": "R1", "type": "resistor", "value": resistance},
        {"id": "R2", "type": "resistor", "value": resistance},
        {"id": "GND", "type": "ground"},
    ]
    connections = [
        wire("V1", 0, "R1", 0),
        wire("R1", 0, "R2", 0),
        wire("R1", 1, "GND", 0),
        wire("R2", 1, "GND", 0),
        wire("V1", 1, "GND", 0),
    ]
    return components, connections


def voltage_divider(voltage=10.0, r_top=1000.0, r_bottom=1000.0):
    """V1 -> R1 -> R2 -> ground. Node 1 is the source, node 2 the midpoint."""
    components = [
        {"id": "V1", "type": "voltage_source", "value": voltage},
        {"id": "R1", "type": "resistor", "value": r_top},
        {"id": "R2", "type": "resistor", "value": r_bottom},
        {"id": "GND", "type": "ground"},
    ]
    connections = [
        wire("V1", 0, "R1", 0),
        wire("R1", 1, "R2", 0),
        wire("R2", 1, "GND", 0),
        wire("V1", 1, "GND", 0),
    ]
    return components, connections


def rc_lowpass(voltage=5.0, resistance=1000.0, capacitance=1e-6):
    """V1 -> R1 -> C1 -> ground. Node 1 is the input, node 2 the capacitor."""
    components = [
        {"id": "V1", "type": "voltage_source", "value": voltage, "acMagnitude": 1.0},
        {"id": "R1", "type": "resistor", "value": resistance},
        {"id": "C1", "type": "capacitor", "value": capacitance},
        {"id": "GND", "type": "ground"},
    ]
    connections = [
        wire("V1", 0, "R1", 0),
        wire("R1", 1, "C1", 0),
        wire("C1", 1, "GND", 0),
        wire("V1", 1, "GND", 0),
    ]
    return components, connections


def rl_series(voltage=1.0, resistance=10.0, inductance=1e-3):
    """V1 -> R1 -> L1 -> ground. Node 1 is the input, node 2 the inductor."""
    components = [
        {"id": "V1", "type": "voltage_source", "value": voltage, "acMagnitude": 1.0},
        {"id": "R1", "type": "resistor", "value": resistance},
        {"id": "L1", "type": "inductor", "value": inductance},
        {"id": "GND", "type": "ground"},
    ]
    connections = [
        wire("V1", 0, "R1", 0),
        wire("R1", 1, "L1", 0),
        wire("L1", 1, "GND", 0),
        wire("V1", 1, "GND", 0),
    ]
    return components, connections


def conflicting_sources():
    """Two different ideal voltage sources in parallel: a singular system."""
    components = [
        {"id": "V1", "type": "voltage_source", "value": 5.0},
        {"id": "V2", "type": "voltage_source", "value": 3.0},
        {"id": "GND", "type": "ground"},
    ]
    connections = [
        wire("V1", 0, "V2", 0),
        wire("V1", 1, "GND", 0),
        wire("V2", 1, "GND", 0),
    ]
    return components, connections


def rl_parallel(voltage=1.0, resistance=10.0, inductance=1e-3):
    """V1 -> R1 -> (L1 || L2) -> ground. Node 1 is the input, node 2 the inductor top."""
    components = [
        {"id": "V1", "type": "voltage_source", "value": voltage},
        {"id": "R1", "type": "resistor", "value": resistance},
        {"id": "L1", "type": "inductor", "value": inductance},
        {"id": "L2", "type": "inductor", "value": inductance},
        {"id": "GND", "type": "ground"},
    ]
    connections = [
        wire("V1", 0, "R1", 0),
        wire("R1", 1, "L1", 0),
        wire("L1", 0, "L2", 0),
        wire("L1", 1, "GND", 0),
        wire("L2", 1, "GND", 0),
        wire("V1", 1, "GND", 0),
    ]
    return components, connections


def rc_parallel_caps(voltage=1.0, resistance=1000.0, capacitances=(1e-6, 1e-6)):
    """V1 -> R1 -> (C1 || C2) -> ground. Node 1 is the input, node 2 the capacitor top."""
    c1, c2 = capacitances
    components = [
        {"id": "V1", "type": "voltage_source", "value": voltage},
        {"id": "R1", "type": "resistor", "value": resistance},
        {"id": "C1", "type": "capacitor", "value": c1},
        {"id": "C2", "type": "capacitor", "value": c2},
        {"id": "GND", "type": "ground"},
    ]
    connections = [
        wire("V1", 0, "R1", 0),
        wire("R1", 1, "C1", 0),
        wire("C1", 0, "C2", 0),
        wire("C1", 1, "GND", 0),
        wire("C2", 1, "GND", 0),
        wire("V1", 1, "GND", 0),
    ]
    return components, connections
