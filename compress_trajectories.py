"""
compress_trajectories.py

Reads a directory of GeoLife .plt files, simplifies the combined trajectory with
Douglas-Peucker and compares the serialized size of the absolute and
delta-encoded results.

- Configuration: defaults < YAML file (--config) < command-line flags.
- Logging to stdout (see trajectory_compression.pipeline_helpers).
- Outputs: compression_report.txt and compression_metadata.json in --output-dir,
  plus an optional PNG plot (--plot).

Usage:
    python compress_trajectories.py --input-dir geolife/ --epsilon 1000
"""

import argparse
import logging
import sys
from typing import List, Optional

from trajectory_compression.config import CompressionConfig, load_config
from trajectory_compression.errors import ConfigError, PltParseError
from trajectory_compression.pipeline_helpers import StepMetadataLogger, configure_logging, profile_step
from trajectory_compression.plt_reader import read_plt_directory
from trajectory_compression.reporting import (
    CompressionStats,
    format_report,
    plot_simplification,
    save_plot,
    write_report,
)
from trajectory_compression.serialization import COMPRESSIONS, serialized_size
from trajectory_compression.trajectory import Trajectory


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simplify GeoLife trajectories and compare serialized sizes.")
    parser.add_argument('--config', default=None, help='YAML config file (optional)')
    parser.add_argument('--input-dir', '-i', default=None, help='Directory containing .plt files (default: geolife/)')
    parser.add_argument('--epsilon', type=int, default=None, help='Simplification tolerance in 10^-scale degrees (default: 1000)')
    parser.add_argument('--scale', type=int, default=None, help='Fractional digits kept for coordinates (default: 6)')
    parser.add_argument('--compression', choices=COMPRESSIONS, default=None, help='Parquet compression codec (default: zstd)')
    parser.add_argument('--output-dir', '-o', default=None, help='Directory for the report and metadata (default: data/compression_stats)')
    parser.add_argument('--plot', default=None, help='Write a PNG comparing original and simplified paths')
    parser.add_argument('--no-progress', action='store_true', help='Disable the progress bar')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> CompressionConfig:
    config = load_config(args.config)
    return config.merged({
        "input_dir": args.input_dir,
        "epsilon": args.epsilon,
        "scale": args.scale,
        "compression": args.compression,
        "output_dir": args.output_dir,
        "plot": args.plot,
    })


def run(config: CompressionConfig, progress: bool = True) -> CompressionStats:
    metadata_logger = StepMetadataLogger(output_dir=config.output_dir)
    metadata_logger.add_stat("config", {
        "input_dir": config.input_dir,
        "epsilon": config.epsilon,
        "scale": config.scale,
        "compression": config.compression,
    })

    samples, original_bytes = profile_step("read", metadata_logger)(read_plt_directory)(
        config.input_dir, progress=progress
    )
    trajectory = profile_step("build", metadata_logger)(Trajectory.from_samples)(samples, scale=config.scale)

    mask = profile_step("simplify", metadata_logger)(trajectory.simplification_mask)(config.epsilon)
    simplified = profile_step("filter", metadata_logger)(trajectory.filter)(mask)
    logging.info(f"[SIMPLIFY] Kept {len(simplified):,} of {len(trajectory):,} points (epsilon={config.epsilon})")

    absolute_bytes = serialized_size(simplified.to_frame(), config.compression)
    delta_bytes = serialized_size(simplified.to_delta().to_frame(), config.compression)
    logging.info(f"[SERIALIZE] absolute={absolute_bytes:,} bytes, delta={delta_bytes:,} bytes")

    stats = CompressionStats(
        original_bytes=original_bytes,
        total_points=len(trajectory),
        simplified_points=len(simplified),
        absolute_bytes=absolute_bytes,
        delta_bytes=delta_bytes,
        epsilon=config.epsilon,
        compression=config.compression,
    )
    write_report(stats, config.output_dir, metadata_logger)
    if config.plot:
        if len(trajectory) > 0:
            fig, _ = plot_simplification(trajectory, simplified)
            save_plot(fig, config.plot, metadata_logger)
        else:
            logging.warning("Skipping plot: no samples were read")

    metadata_logger.log_stats()
    metadata_logger.save()
    return stats


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = resolve_config(args)
        logging.info(f"Running trajectory compression: {config}")
        stats = run(config, progress=not args.no_progress)
    except (ConfigError, PltParseError, FileNotFoundError, ValueError) as e:
        logging.error(f"Trajectory compression failed: {e}")
        return 1

    print()
    print(format_report(stats))
    return 0


if __name__ == "__main__":
    sys.exit(main())
