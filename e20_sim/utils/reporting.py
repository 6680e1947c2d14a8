from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict

from ..cache_config import CacheConfig
from ..config import SimConfig
from ..runtime.cache import CacheEvent
from ..runtime.simulator import SimResult
from ..runtime.state import FinalState
from . import viz


def format_state(final: FinalState) -> str:
    """Renders the final machine state: pc, registers, then memory in hex rows of 8."""
    lines = ["Final state:", f"\tpc={final.pc:5d}"]
    for reg, value in enumerate(final.registers):
        lines.append(f"\t${reg}={value:5d}")

    row = []
    for count, word in enumerate(final.memory):
        row.append(f"{word:04x} ")
        if count % 8 == 7:
            lines.append("".join(row))
            row = []
    if row:
        lines.append("".join(row))
    return "\n".join(lines)


def format_cache_config(config: CacheConfig) -> str:
    return (f"Cache {config.name} has size {config.size}, associativity {config.associativity}, "
            f"blocksize {config.blocksize}, rows {config.num_rows}")


def format_log_entry(event: CacheEvent) -> str:
    status = f"{event.level} {event.outcome.value}"
    return f"{status:8s} pc:{event.pc:5d}\taddr:{event.address:5d}\trow:{event.row:4d}"


def generate_report_json(result: SimResult, config: SimConfig) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary from a finished run."""
    return {
        "program": config.program,
        "steps": result.steps,
        "final_state": result.final_state.to_json(),
        "cache_stats": result.cache_stats,
        "events": [e.to_json() for e in result.events],
        "config": {k: (list(v) if isinstance(v, tuple) else v) for k, v in config.__dict__.items()},
    }


def generate_report(result: SimResult, config: SimConfig):
    """Generates all report artifacts."""
    report_data = generate_report_json(result, config)
    output_dir = Path(config.report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / "report.json", "w") as f:
        json.dump(report_data, f, indent=4)

    viz.export_cache_chart(report_data['events'], str(output_dir / "report.html"))

    if report_data['cache_stats']:
        print(viz.export_cache_ascii(report_data['cache_stats']))

    print(f"\nReports generated in {output_dir.absolute()}")
    print(f"Instructions executed: {report_data['steps']}")
