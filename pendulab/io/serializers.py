"""Serialize exported runs: JSON document, CSV time series, LaTeX parameter table."""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from pendulab.core.config import ParameterSpec
from pendulab.core.history import ExportData

logger = logging.getLogger(__name__)


def _convert(d: Any) -> Any:
    """Convert numpy values and tuples to JSON-compatible types."""
    if isinstance(d, np.ndarray):
        return d.tolist()
    if isinstance(d, dict):
        return {k: _convert(v) for k, v in d.items()}
    if isinstance(d, (list, tuple)):
        return [_convert(x) for x in d]
    if isinstance(d, np.bool_):
        return bool(d)
    if isinstance(d, (np.floating, np.integer)):
        return float(d) if isinstance(d, np.floating) else int(d)
    return d


def _write(text: str, path: Union[str, Path]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info("Exported %s", path)


def export_to_json(
    data: ExportData,
    path: Optional[Union[str, Path]] = None,
    indent: int = 2,
) -> str:
    """
    Structured document with meta, params, time_series and phase_space.
    Written to path when given; the JSON text is returned in any case.
    """
    text = json.dumps(_convert(data.to_dict()), indent=indent, ensure_ascii=False)
    if path is not None:
        _write(text, path)
    return text


def csv_header(data: ExportData) -> List[str]:
    headers = ["time"]
    for i in range(data.num_bodies):
        headers += [f"x{i}", f"y{i}", f"z{i}", f"vx{i}", f"vy{i}", f"vz{i}"]
    headers += ["kinetic", "potential", "total"]
    if data.phase_space:
        for i in range(len(data.phase_space)):
            headers += [f"theta{i}", f"omega{i}"]
    return headers


def export_to_csv(
    data: ExportData,
    path: Optional[Union[str, Path]] = None,
    precision: int = 6,
    delimiter: str = ",",
) -> str:
    """
    One row per recorded step: time, per-body position and velocity,
    energies and (when present) per-body angle and angular velocity.
    """
    fmt = f"{{:.{precision}f}}".format
    ts = data.time_series
    phase = data.phase_space or ()
    lines = [delimiter.join(csv_header(data))]
    for k, t in enumerate(ts.time):
        row = [fmt(t)]
        for pos, vel in zip(ts.positions[k], ts.velocities[k]):
            row += [fmt(pos.x), fmt(pos.y), fmt(pos.z), fmt(vel.x), fmt(vel.y), fmt(vel.z)]
        e = ts.energy[k]
        row += [fmt(e.kinetic), fmt(e.potential), fmt(e.total)]
        for body in phase:
            row += [fmt(body[k].angle), fmt(body[k].angular_velocity)]
        lines.append(delimiter.join(row))
    text = "\n".join(lines)
    if path is not None:
        _write(text, path)
    return text


@dataclass(frozen=True)
class TableRow:
    label: str
    value: Union[float, str]
    unit: str = ""


def parameter_rows(
    data: ExportData,
    schema: Optional[Mapping[str, ParameterSpec]] = None,
) -> List[TableRow]:
    """Scalar parameters of an export as table rows (labels/units from schema when given)."""
    rows = []
    for name, value in data.params.items():
        spec = schema.get(name) if schema else None
        label = spec.label if spec and spec.label else name
        unit = spec.unit if spec else ""
        if isinstance(value, bool):
            value = "yes" if value else "no"
        rows.append(TableRow(label, value, unit))
    return rows


def export_to_latex(rows: Sequence[TableRow], caption: str, label: str) -> str:
    """booktabs table with Parameter / Value / Unit columns (numbers with 4 decimals)."""
    lines = [
        "\\begin{table}[htbp]",
        "\\centering",
        f"\\caption{{{caption}}}",
        f"\\label{{{label}}}",
        "\\begin{tabular}{lrl}",
        "\\toprule",
        "Parameter & Value & Unit \\\\",
        "\\midrule",
    ]
    for row in rows:
        value = f"{row.value:.4f}" if isinstance(row.value, (int, float)) else str(row.value)
        lines.append(f"{row.label} & {value} & {row.unit} \\\\")
    lines += ["\\bottomrule", "\\end{tabular}", "\\end{table}"]
    return "\n".join(lines)


@dataclass(frozen=True)
class SeriesStats:
    mean: float
    std: float
    min: float
    max: float
    range: float

    def to_dict(self) -> Dict[str, float]:
        return {"mean": self.mean, "std": self.std, "min": self.min, "max": self.max, "range": self.range}


def calculate_stats(values: Sequence[float]) -> SeriesStats:
    """Mean, population std, min, max and range (all zero for empty input)."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return SeriesStats(0.0, 0.0, 0.0, 0.0, 0.0)
    lo, hi = float(arr.min()), float(arr.max())
    return SeriesStats(float(arr.mean()), float(arr.std()), lo, hi, hi - lo)


def to_scientific(n: float, precision: int = 3) -> str:
    """Human-readable scientific notation, e.g. '1.235 × 10^-3'."""
    if n == 0:
        return "0"
    exp = math.floor(math.log10(abs(n)))
    mantissa = n / 10 ** exp
    return f"{mantissa:.{precision}f} × 10^{exp}"
