import functools
import json
import logging
import os
import sys
import time
from typing import Any, Dict, Optional

import psutil


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )


class StepMetadataLogger:
    """Collects run statistics and writes them as JSON next to the run outputs."""

    def __init__(self, output_dir: str, filename: str = "compression_metadata.json"):
        self.output_dir = output_dir
        self.metadata: Dict[str, Any] = {}
        self.filepath = os.path.join(output_dir, filename)

    def add_stat(self, key: str, value: Any):
        self.metadata[key] = value

    def add_stats(self, stats: Dict[str, Any]):
        self.metadata.update(stats)

    def log_stats(self, level=logging.INFO):
        for key, value in self.metadata.items():
            logging.log(level, f"[METADATA] {key}: {value}")

    def save(self) -> str:
        os.makedirs(self.output_dir, exist_ok=True)
        with open(self.filepath, "w") as f:
            json.dump(self.metadata, f, indent=2, default=str)
        logging.info(f"Run metadata saved to {self.filepath}")
        return self.filepath

    def get(self, key: str, default=None):
        return self.metadata.get(key, default)


def profile_step(step_name: str, metadata_logger: Optional[StepMetadataLogger] = None):
    """
    Decorator logging wall time and resident memory around a pipeline step.
    The elapsed seconds are stored as `<step_name>_seconds` when a metadata logger is given.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            process = psutil.Process(os.getpid())
            mem_before = process.memory_info().rss / 1024**2  # MB
            t0 = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed = time.perf_counter() - t0
            mem_after = process.memory_info().rss / 1024**2  # MB
            logging.info(
                f"[PROFILE] {step_name}: time={elapsed:.3f}s, mem_before={mem_before:.2f}MB, "
                f"mem_after={mem_after:.2f}MB, delta={mem_after - mem_before:.2f}MB"
            )
            if metadata_logger is not None:
                metadata_logger.add_stat(f"{step_name}_seconds", elapsed)
            return result
        return wrapper
    return decorator
