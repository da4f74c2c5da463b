"""
internrank structured logging - progress telemetry for ranking runs.

Answers three questions:
1. What phase is the run in?
2. How many rows were read, kept and dropped?
3. Where did the results go?
"""

import sys
from datetime import UTC, datetime

# Force line buffering for immediate output (important on Windows/PowerShell)
try:
    sys.stdout.reconfigure(line_buffering=True)  # type: ignore
except Exception:
    pass  # Fallback for non-reconfigurable streams


def _print(*args: object, **kwargs: object) -> None:
    """Print with immediate flush."""
    print(*args, **kwargs, flush=True)


def _eprint(*args: object, **kwargs: object) -> None:
    """Print to stderr with immediate flush."""
    print(*args, **kwargs, file=sys.stderr, flush=True)


class ProgressLogger:
    """
    Structured progress logger for internrank pipeline runs.

    Row-level skips are only shown in verbose mode; the skip policy is
    silent toward the JSON output.
    """

    def __init__(self, run_id: str, verbose: bool = False, quiet: bool = False):
        self.run_id = run_id
        self.verbose = verbose
        # Quiet keeps stdout clean for the JSON; errors still reach stderr
        self.quiet = quiet
        self.start_time = datetime.now(UTC)
        self.phase_times: dict[str, datetime] = {}

    def _out(self, msg: str) -> None:
        if not self.quiet:
            _print(msg)

    def phase(self, name: str, detail: str = "") -> None:
        """Log a major phase transition."""
        now = datetime.now(UTC)
        self.phase_times[name] = now
        elapsed = (now - self.start_time).total_seconds()

        if detail:
            self._out(f"[Phase] {name}: {detail} ({elapsed:.1f}s)")
        else:
            self._out(f"[Phase] {name} ({elapsed:.1f}s)")

    def progress(self, item: str, current: int, total: int, detail: str = "") -> None:
        """Log a progress update (e.g., export 2/3)."""
        pct = (current / total * 100) if total > 0 else 0
        if detail:
            self._out(f"  [{item} {current}/{total}] {detail} ({pct:.0f}%)")
        else:
            self._out(f"  [{item} {current}/{total}] ({pct:.0f}%)")

    def rows(self, read: int, accepted: int, skipped: int) -> None:
        """Log ingestion results."""
        self._out(f"  [Rows] {read} read -> {accepted} accepted, {skipped} skipped")

    def skip_reasons(self, reasons: dict[str, int]) -> None:
        """Log skip counts per reason (verbose only)."""
        if self.verbose and reasons:
            reason_str = ", ".join(f"{k}={v}" for k, v in sorted(reasons.items()))
            self._out(f"  [Skipped] {reason_str}")

    def deduped(self, accepted: int, unique: int) -> None:
        """Log deduplication results."""
        self._out(f"  [Deduped] {accepted} -> {unique} applicants")

    def ranked(self, last_names: list[str]) -> None:
        """Log the top of the ranking."""
        names = ", ".join(last_names) if last_names else "none"
        self._out(f"  [Top] {names}")

    def skip(self, reason: str, detail: str) -> None:
        """Log a skipped row with reason (verbose only)."""
        if self.verbose:
            truncated = detail[:60] + "..." if len(detail) > 60 else detail
            self._out(f"    [Skip] {reason}: {truncated}")

    def finish(self, unique: int, output_dir: str = "") -> None:
        """Log run completion."""
        elapsed = (datetime.now(UTC) - self.start_time).total_seconds()
        minutes = int(elapsed // 60)
        seconds = int(elapsed % 60)

        self._out(f"\n[internrank] Run complete in {minutes}m{seconds}s")
        self._out(f"  Applicants: {unique}")
        if output_dir:
            self._out(f"  Output: {output_dir}")

    def error(self, msg: str) -> None:
        """Log an error."""
        _eprint(f"[Error] {msg}")

    def warning(self, msg: str) -> None:
        """Log a warning."""
        _eprint(f"[Warning] {msg}")
