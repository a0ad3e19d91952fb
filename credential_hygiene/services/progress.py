"""Progress forwarding shared by the audit and cleanup runs."""
from __future__ import annotations

from typing import Optional

from credential_hygiene.models import ProgressCallback


class ProgressReporter:
    """Forwards ``(current, total)`` to a callback, never letting ``current`` go backwards.

    ``finish()`` delivers the final ``(total, total)`` call unless it was
    already sent, so callers can rely on it as a completion signal.
    """

    def __init__(self, callback: Optional[ProgressCallback], total: int) -> None:
        self.callback = callback
        self.total = total
        self.current = -1

    def report(self, current: int) -> None:
        current = max(current, self.current)
        self.current = current
        if self.callback is not None:
            self.callback(current, self.total)

    def finish(self) -> None:
        if self.current != self.total:
            self.report(self.total)
