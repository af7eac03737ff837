"""
Command line interface: run an analysis on a circuit saved as JSON.

    circuit-engine dc divider.json
    circuit-engine ac rc.json --start 1 --end 1e5 --input 1 --output 2
    circuit-engine transient rc.json --duration 5e-3 --step 1e-5 --json
    circuit-engine spectrum rc.json --duration 1e-2 --step 1e-5 --node 2
"""

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import List, Optional

from .config import PIVOT_POLICIES, SOLVERS, IntegrationMethod, SimulationSettings
from .core.analysis import WINDOWS, ResultsFormatter
from .core.simulator import CircuitSimulator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    examples = textwrap.dedent(
        """
        Circuit file format:
          {"components": [{"id": "V1", "type": "voltage_source", "value": 12}, ...],
           "connections": [{"from": {"componentId": "V1", "terminal": 0},
                            "to": {"componentId": "R1", "terminal": 0}}, ...]}
        """
    )
    parser = argparse.ArgumentParser(
        prog="circuit-engine",
        description="Modified Nodal Analysis simulator for linear circuits.",
        epilog=examples,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("circuit", type=Path, help="JSON file with components and connections.")
    common.add_argument("--json", action="store_true", help="Print the result dict as JSON.")
    common.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    common.add_argument("--pivot-policy", choices=PIVOT_POLICIES, default="regularize",
                        help="What to do with near-singular pivots.")
    common.add_argument("--solver", choices=SOLVERS, default="gaussian", help="Linear solver backend.")
    common.add_argument("--gmin", type=float, default=None, help="Conductance added to every node.")

    transient = argparse.ArgumentParser(add_help=False)
    transient.add_argument("--duration", type=float, default=1e-3, help="Simulated time in seconds.")
    transient.add_argument("--step", type=float, default=1e-6, help="Fixed time step in seconds.")
    transient.add_argument(
        "--method",
        choices=[m.value for m in IntegrationMethod],
        default=IntegrationMethod.TRAPEZOIDAL.value,
        help="Integration method.",
    )

    subparsers = parser.add_subparsers(dest="analysis", required=True)
    subparsers.add_parser("dc", parents=[common], help="DC operating point.")

    ac = subparsers.add_parser("ac", parents=[common], help="AC frequency sweep (Bode data).")
    ac.add_argument("--start", type=float, default=1.0, help="Start frequency in Hz.")
    ac.add_argument("--end", type=float, default=1e6, help="End frequency in Hz.")
    ac.add_argument("--ppd", type=int, default=10, help="Points per decade.")
    ac.add_argument("--input", type=int, default=None, help="Input node for the gain.")
    ac.add_argument("--output", type=int, default=None, help="Output node for the gain.")

    subparsers.add_parser("transient", parents=[common, transient], help="Fixed-step transient analysis.")

    spectrum = subparsers.add_parser("spectrum", parents=[common, transient],
                                     help="FFT of a node waveform from a transient run.")
    spectrum.add_argument("--node", type=int, required=True, help="Node whose waveform is analyzed.")
    spectrum.add_argument("--window", choices=list(WINDOWS), default="hann", help="Window function.")
    spectrum.add_argument("--size", type=int, default=None, help="FFT size (power of two).")

    return parser


def load_circuit(path: Path):
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected an object with 'components' and 'connections'")
    return data.get("components", []), data.get("connections", [])


def run(args: argparse.Namespace):
    """Run the requested analysis and return its result"""
    options = {"pivot_policy": args.pivot_policy, "solver": args.solver}
    if args.gmin is not None:
        options["gmin"] = args.gmin
    settings = SimulationSettings.from_dict(options)

    components, connections = load_circuit(args.circuit)
    simulator = CircuitSimulator(components, connections, settings)

    if args.analysis == "dc":
        result = simulator.run_dc_analysis()
    elif args.analysis == "ac":
        result = simulator.run_ac_analysis(
            start_freq=args.start, end_freq=args.end, points_per_decade=args.ppd,
            input_node=args.input, output_node=args.output,
        )
    else:
        result = simulator.run_transient_analysis(duration=args.duration, time_step=args.step, method=args.method)
        if args.analysis == "spectrum" and result.success:
            result = simulator.run_spectrum_analysis(args.node, window=args.window, size=args.size)

    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s: %(message)s")

    try:
        result = run(args)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot load circuit: {e}")
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(ResultsFormatter(result).get_results_description())

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
