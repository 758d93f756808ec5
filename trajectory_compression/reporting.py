import logging
import os
from dataclasses import asdict, dataclass
from typing import Optional

import matplotlib.pyplot as plt
from prettytable import PrettyTable

from .pipeline_helpers import StepMetadataLogger
from .trajectory import Trajectory


def _ratio(numerator: float, denominator: float) -> float:
    return 100.0 * numerator / denominator if denominator > 0 else 0.0


@dataclass
class CompressionStats:
    original_bytes: int
    total_points: int
    simplified_points: int
    absolute_bytes: int
    delta_bytes: int
    epsilon: int
    compression: str

    @property
    def points_ratio(self) -> float:
        return _ratio(self.simplified_points, self.total_points)

    @property
    def delta_vs_absolute_ratio(self) -> float:
        return _ratio(self.delta_bytes, self.absolute_bytes)

    @property
    def delta_vs_original_ratio(self) -> float:
        return _ratio(self.delta_bytes, self.original_bytes)

    def to_dict(self) -> dict:
        stats = asdict(self)
        stats.update({
            "points_ratio_pct": self.points_ratio,
            "delta_vs_absolute_pct": self.delta_vs_absolute_ratio,
            "delta_vs_original_pct": self.delta_vs_original_ratio,
        })
        return stats


def format_report(stats: CompressionStats) -> str:
    table = PrettyTable()
    table.field_names = ["metric", "value"]
    table.align["metric"] = "l"
    table.align["value"] = "r"
    table.add_row(["Original size", f"{stats.original_bytes:,} bytes"])
    table.add_row(["Size after simplification", f"{stats.absolute_bytes:,} bytes"])
    table.add_row(["Serialized delta size", f"{stats.delta_bytes:,} bytes"])
    table.add_row(["Total points", f"{stats.total_points:,} points"])
    table.add_row(["Simplified points", f"{stats.simplified_points:,} points"])
    table.add_row(["Ratio points", f"{stats.points_ratio:.2f} %"])
    table.add_row(["Ratio bytes delta vs non-delta", f"{stats.delta_vs_absolute_ratio:.2f} %"])
    table.add_row(["Ratio bytes delta vs original", f"{stats.delta_vs_original_ratio:.2f} %"])
    return table.get_string()


def write_report(stats: CompressionStats, output_dir: str, metadata_logger: Optional[StepMetadataLogger] = None) -> str:
    """Write the report table to `<output_dir>/compression_report.txt` and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    out_path = os.path.join(output_dir, "compression_report.txt")
    with open(out_path, "w") as f:
        f.write(format_report(stats) + "\n")
    if metadata_logger:
        metadata_logger.add_stat("compression", stats.to_dict())
        metadata_logger.add_stat("compression_report_txt", out_path)
    return out_path


def plot_simplification(original: Trajectory, simplified: Trajectory) -> "tuple[plt.Figure, plt.Axes]":
    """
    Overlay the original and simplified paths (longitude on x, latitude on y, degrees).
    """
    if len(original) == 0:
        raise ValueError("Cannot plot an empty trajectory")
    factor = 10 ** original.scale
    fig, ax = plt.subplots()
    ax.plot(
        [v / factor for v in original.longitudes],
        [v / factor for v in original.latitudes],
        color="lightgray",
        linewidth=0.8,
        label=f"original ({len(original):,} points)",
    )
    ax.plot(
        [v / factor for v in simplified.longitudes],
        [v / factor for v in simplified.latitudes],
        color="red",
        marker=".",
        markersize=3,
        linewidth=1.0,
        label=f"simplified ({len(simplified):,} points)",
    )
    ax.set_facecolor("white")
    ax.set_title("Douglas-Peucker simplification")
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_aspect("equal", adjustable="datalim")
    ax.legend()
    plt.tight_layout()
    return fig, ax


def save_plot(fig, out_path: str, metadata_logger: Optional[StepMetadataLogger] = None) -> str:
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    fig.savefig(out_path)
    plt.close(fig)
    logging.info(f"Saved simplification plot to {out_path}")
    if metadata_logger:
        metadata_logger.add_stat("simplification_plot", out_path)
    return out_path
