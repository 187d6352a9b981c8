from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is on path when running this script directly
_script_dir = Path(__file__).resolve().parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from rover_sim.config import MissionConfig, load_config
from rover_sim.errors import RoverSimError
from rover_sim.mission import MissionControl
from telemetry.logger import TelemetryLogger


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Interactive grid rover mission control.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to mission YAML config (omit to be prompted for everything).",
    )
    parser.add_argument(
        "--telemetry",
        type=str,
        default=None,
        help="JSONL telemetry output path (overrides config).",
    )
    parser.add_argument(
        "--echo",
        action="store_true",
        help="Echo telemetry events to stderr.",
    )
    parser.add_argument(
        "--batch",
        type=str,
        default=None,
        help="Run a single command batch (e.g. MMRML) non-interactively and exit.",
    )
    args = parser.parse_args(argv)

    try:
        cfg = load_config(args.config) if args.config else MissionConfig()
    except RoverSimError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2

    telemetry_path = args.telemetry or cfg.telemetry.path
    with TelemetryLogger(telemetry_path, echo=args.echo or cfg.telemetry.echo) as telemetry:
        mission = MissionControl(cfg, telemetry=telemetry)
        try:
            if args.batch is None:
                mission.run()
                return 0
            mission.initialize()
            outcome = mission.run_batch(args.batch)
            print(mission.rover.status())
            return 0 if outcome.ok else 1
        except RoverSimError as exc:
            print(f"Mission Control Error: {exc}", file=sys.stderr)
            return 1
        except EOFError:
            print("Mission Control Error: input ended before the mission was set up", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
