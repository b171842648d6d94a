"""
cProfile based profiling for debug traces.
"""

import cProfile
import io
import os
import pstats
import uuid
from typing import Optional


class Profiler:
    """
    Performance profiler for a single request.

    ``save_run`` writes the collected stats in ``pstats`` format to
    ``<output_dir>/<run_id>.<name>.prof`` so they can be opened later with
    ``python -m pstats`` or snakeviz.
    """

    def __init__(self, output_dir: Optional[str] = None):
        self.output_dir = output_dir
        self.profiler = cProfile.Profile()
        self.is_profiling = False

    def start_profiling(self):
        """Start performance profiling."""
        if not self.is_profiling:
            self.profiler = cProfile.Profile()
            self.profiler.enable()
            self.is_profiling = True

    def stop_profiling(self, report: bool = True) -> Optional[str]:
        """Stop profiling and return formatted stats, or None when ``report`` is off."""
        if self.is_profiling:
            self.profiler.disable()
            self.is_profiling = False
            if not report:
                return None

            s = io.StringIO()
            ps = pstats.Stats(self.profiler, stream=s).sort_stats('cumulative')
            ps.print_stats(30)
            return s.getvalue()
        return "Profiler not running"

    def save_run(self, name: str) -> str:
        """Dump the last run to disk and return its run id"""
        if self.output_dir is None:
            raise ValueError("Profiler has no output directory")
        run_id = uuid.uuid4().hex
        safe_name = name.replace('/', '_') or 'index'
        self.profiler.dump_stats(os.path.join(self.output_dir, f"{run_id}.{safe_name}.prof"))
        return run_id
