"""
Results Formatter - human-readable reports for analysis results.

This module handles the formatting and presentation of simulation results
for the command line and for log output.
"""

import math

import numpy as np

from .results import ACResult, DCResult, SpectrumResult, TransientResult


class ResultsFormatter:
    """
    Handles formatting and presentation of simulation results.
    """

    def __init__(self, result, max_rows: int = 20):
        self.result = result
        self.max_rows = max_rows

    def get_results_description(self):
        """
        Generate comprehensive description of simulation results.
        """
        if self.result is None:
            return "No simulation results available."
        if not self.result.success:
            return f"Simulation failed: {self.result.message}"

        if isinstance(self.result, DCResult):
            description = self._format_dc()
        elif isinstance(self.result, ACResult):
            description = self._format_ac()
        elif isinstance(self.result, TransientResult):
            description = self._format_transient()
        elif isinstance(self.result, SpectrumResult):
            description = self._format_spectrum()
        else:
            description = self.result.message + "\n"

        return description + self._format_warnings()

    def _format_dc(self):
        description = "DC Simulation Results:\n"
        description += self._format_node_voltages(self.result.node_voltages)
        description += self._format_component_data()
        return description

    def _format_node_voltages(self, node_voltages):
        """Format node voltage results."""
        description = "Node Voltages:\n"

        if not node_voltages:
            return description + "  No node voltage data.\n"

        for node_id in sorted(node_voltages):
            voltage = node_voltages[node_id]
            if self._is_invalid_value(voltage):
                continue

            ground_status = " (Ground)" if node_id == 0 else ""
            description += f"  Node {node_id}{ground_status}: {self._format_value_with_unit(voltage, 'V')}\n"

        return description + "\n"

    def _format_component_data(self):
        """Format per-component voltage, current and power."""
        description = "Component Currents:\n"

        if not self.result.component_data:
            return description + "  No component current data.\n"

        for data in self.result.component_data.values():
            if data.type == "ground" or self._is_invalid_value(data.current):
                continue
            arrow = "→" if data.current >= 0 else "←"
            current = self._format_value_with_unit(abs(data.current), 'A')
            voltage = self._format_value_with_unit(data.voltage, 'V')
            power = self._format_value_with_unit(data.power, 'W')
            description += f"  {data.label} {list(data.nodes)}: {current} {arrow}, {voltage}, {power}\n"

        return description + "\n"

    def _format_ac(self):
        result = self.result
        description = f"AC Sweep Results ({len(result.sweep)} points):\n"

        if not result.points:
            return description + "  No input/output node pair given, Bode data not computed.\n"

        description += f"  Gain V({result.output_node}) / V({result.input_node})\n"
        description += "  Frequency         Magnitude      Phase\n"
        for point in self._rows(result.points):
            description += (
                f"  {self._format_value_with_unit(point.frequency, 'Hz'):<16}"
                f"  {point.magnitude_db:>9.3f} dB  {point.phase_degrees:>8.2f}°\n"
            )
        return description

    def _format_transient(self):
        result = self.result
        description = (
            f"Transient Results ({len(result.samples)} samples, "
            f"dt = {self._format_value_with_unit(result.time_step, 's')}, {result.method}):\n"
        )
        nodes = sorted(n for n in (result.samples[0].node_voltages if result.samples else {}) if n != 0)
        description += "  Time" + "".join(f"{'V(' + str(n) + ')':>14}" for n in nodes) + "\n"
        for sample in self._rows(result.samples):
            row = "".join(f"{sample.node_voltages[n]:>14.6g}" for n in nodes)
            description += f"  {self._format_value_with_unit(sample.time, 's')}{row}\n"
        return description

    def _format_spectrum(self):
        result = self.result
        description = (
            f"Spectrum ({result.size}-point FFT, {result.window} window, "
            f"resolution {self._format_value_with_unit(result.resolution, 'Hz')}):\n"
        )
        peak = result.peak()
        if peak is not None:
            description += (
                f"  Peak: {self._format_value_with_unit(peak.frequency, 'Hz')} "
                f"({peak.magnitude_db:.2f} dB)\n"
            )
        for b in self._rows(result.bins):
            description += f"  {self._format_value_with_unit(b.frequency, 'Hz'):<16}  {b.magnitude_db:>9.3f} dB\n"
        return description

    def _format_warnings(self):
        if not self.result.warnings:
            return ""
        return "Warnings:\n" + "".join(f"  {w}\n" for w in self.result.warnings)

    def _rows(self, items):
        """Evenly thinned rows so long sweeps stay readable"""
        if len(items) <= self.max_rows:
            return items
        indexes = np.unique(np.linspace(0, len(items) - 1, self.max_rows).round().astype(int))
        return [items[i] for i in indexes]

    def _is_invalid_value(self, value):
        """Check if value is invalid (None, NaN, or infinite)."""
        if value is None:
            return True
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return True
        return False

    def _format_value_with_unit(self, value, unit):
        """Format numerical value with appropriate SI prefix and unit."""
        abs_val = abs(value)

        if abs_val == 0:
            return f"0 {unit}"

        scales = ((1, ""), (1e-3, "m"), (1e-6, "μ"), (1e-9, "n"))
        if unit in ("Hz", "W"):
            scales = ((1e6, "M"), (1e3, "k")) + scales
        for scale, prefix in scales:
            if abs_val >= scale:
                return f"{value / scale:.6g} {prefix}{unit}"
        return f"{value:.2e} {unit}"

    def get_summary_stats(self):
        """Get summary statistics of a DC result."""
        result = self.result
        voltages = [v for v in result.node_voltages.values() if not self._is_invalid_value(v)]
        currents = [d.current for d in result.component_data.values() if not self._is_invalid_value(d.current)]

        return {
            'num_nodes': result.num_nodes,
            'num_components': len(result.component_data),
            'max_voltage': max(voltages) if voltages else 0,
            'min_voltage': min(voltages) if voltages else 0,
            'max_current': max(currents) if currents else 0,
            'min_current': min(currents) if currents else 0,
            'total_power': sum(d.power for d in result.component_data.values()),
        }
