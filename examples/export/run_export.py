"""
Example: record a run and export it for a paper.

Writes <model>-export.json, <model>-export.csv and a LaTeX parameter table
to the output directory.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))

from pendulab.io import calculate_stats, export_to_csv, export_to_json, export_to_latex, parameter_rows
from pendulab.logging_config import setup_logging
from pendulab.simulation import MODELS, FixedStepDriver


def main() -> None:
    parser = argparse.ArgumentParser(description="pendulab export run")
    parser.add_argument("--model", default="simple-pendulum", choices=sorted(MODELS))
    parser.add_argument("--seconds", type=float, default=10.0)
    parser.add_argument("--out", default="exports")
    args = parser.parse_args()

    setup_logging()
    model = MODELS[args.model]()
    driver = FixedStepDriver(model)
    n_steps = int(round(args.seconds / driver.simulation.fixed_timestep))
    data = driver.record(n_steps)

    out = Path(args.out)
    export_to_json(data, out / f"{data.meta.id}-export.json")
    export_to_csv(data, out / f"{data.meta.id}-export.csv")
    table = export_to_latex(
        parameter_rows(data, model.params_type.schema()),
        caption=f"{data.meta.name} parameters",
        label=f"tab:{data.meta.id}",
    )
    (out / f"{data.meta.id}-params.tex").write_text(table, encoding="utf-8")

    totals = [e.total for e in data.time_series.energy]
    stats = calculate_stats(totals)
    print(f"{len(data)} samples, total energy mean {stats.mean:.6f} J, range {stats.range:.3e} J")


if __name__ == "__main__":
    main()
