"""CLI for playing an elevator game locally or against a scoring server."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Optional

from dispatch import get_dispatcher
from simulation import Building, DispatchConfig, Simulation
from transport import GameSession, LocalSession, run_game


def play_local(config: DispatchConfig) -> Dict:
    simulation = Simulation.from_config(config)
    building = Building.create(config.elevator_count, simulation.constraints)
    dispatcher = get_dispatcher(config.scheduler)
    ticks = run_game(LocalSession(simulation), building, dispatcher)
    return {
        "ticks": ticks,
        "total_passengers": simulation.total_passengers,
        "final_metrics": asdict(simulation.metrics.snapshot(simulation.current_time)),
    }


def play_remote(config: DispatchConfig, api_url: str) -> Dict:
    building = Building.create(config.elevator_count, config.constraints)
    dispatcher = get_dispatcher(config.scheduler)
    with GameSession.start(config.user, config.problem_id, config.elevator_count, base_url=api_url) as session:
        ticks = run_game(session, building, dispatcher)
    return {"ticks": ticks, "final_timestamp": building.timestamp}


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON game configuration file")
    parser.add_argument(
        "--server",
        nargs="?",
        const="",
        default=None,
        help="Play against a scoring server (defaults to api_url from the config)",
    )
    parser.add_argument("--output", type=Path, help="Optional file path to write results as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every dispatch decision")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    raw = json.loads(args.config.read_text())
    config = DispatchConfig.from_dict(raw)
    if args.server is None:
        results = play_local(config)
    else:
        results = play_remote(config, args.server or config.api_url)
    results.update(
        {
            "name": raw.get("name", args.config.stem),
            "problem_id": config.problem_id,
            "elevator_count": config.elevator_count,
            "scheduler": config.scheduler,
        }
    )

    save_results(args.output, results)

    print(f"Game: {results['name']}")
    print(f"Problem: {config.problem_id} with {config.elevator_count} elevators")
    print(f"Dispatcher: {config.scheduler}")
    print(f"Ticks: {results['ticks']}")
    if "final_metrics" in results:
        print("Final metrics:")
        for key, value in results["final_metrics"].items():
            print(f"  {key}: {value}")
    if args.output:
        print(f"Saved results to {args.output}")


if __name__ == "__main__":
    main()
