"""Export of recorded runs (JSON, CSV, LaTeX) and summary statistics."""

from pendulab.io.serializers import (
    TableRow,
    calculate_stats,
    export_to_csv,
    export_to_json,
    export_to_latex,
    parameter_rows,
    to_scientific,
)

__all__ = [
    "export_to_json",
    "export_to_csv",
    "export_to_latex",
    "parameter_rows",
    "TableRow",
    "calculate_stats",
    "to_scientific",
]
