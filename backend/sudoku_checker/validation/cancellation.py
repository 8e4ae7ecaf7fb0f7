"""Per-run cancellation token.

Cancellation is request-then-observe: ``cancel()`` only flips the flag and
the run notices at its next check. Nothing is interrupted mid-delay.
"""

from typing import Optional


class CancellationToken:
    """One-shot cancellation flag owned by a single run."""

    def __init__(self):
        self._cancelled = False
        self.reason: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation. Idempotent; the first reason wins."""
        if not self._cancelled:
            self._cancelled = True
            self.reason = reason

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "live"
        return f"<CancellationToken {state}>"
