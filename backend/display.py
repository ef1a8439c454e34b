"""
Live code display for the terminal.

`CodeTicker` owns the once-per-second refresh: on every tick it samples the
clock once, asks the core for each account's code at that instant and hands
the resulting rows to a render callback. Stopping is just setting the stop
event; nothing else has to be torn down.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from core.otp_core import (
    DEFAULT_TIME_STEP,
    InvalidSecretError,
    generate_code,
    mask_secret,
    remaining_seconds,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_CODE = "------"
BAR_WIDTH = 30


@dataclass(frozen=True)
class CodeRow:
    account_id: int
    label: str
    issuer: str
    code: Optional[str]
    remaining: int


class CodeTicker:
    """
    Periodically recompute codes for a set of accounts.

    Arguments:
        accounts: callable returning the current accounts (dicts with id,
            label, issuer, secret); re-read on every tick so additions and
            deletions show up without a restart
        render: called with the list of CodeRow for each tick
        clock: returns epoch seconds, time.time by default
        interval: seconds between ticks
    """

    def __init__(self, accounts: Callable[[], Iterable[dict]],
                 render: Callable[[List[CodeRow]], None],
                 clock: Optional[Callable[[], float]] = None,
                 interval: float = 1.0):
        self.accounts = accounts
        self.render = render
        self.clock = clock or time.time
        self.interval = interval
        self.stop_event = threading.Event()

    def snapshot(self) -> List[CodeRow]:
        now = int(self.clock())
        remaining = remaining_seconds(now)
        rows = []
        for account in self.accounts():
            try:
                code = generate_code(account["secret"], now)
            except InvalidSecretError:
                logger.warning("Skipping code for account %s (secret %s)",
                               account["id"], mask_secret(account["secret"]))
                code = None
            rows.append(CodeRow(account["id"], account["label"],
                                account.get("issuer", ""), code, remaining))
        return rows

    def tick(self) -> List[CodeRow]:
        rows = self.snapshot()
        self.render(rows)
        return rows

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Tick until stop() is called (or max_ticks is reached); returns ticks done."""
        ticks = 0
        while not self.stop_event.is_set():
            self.tick()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            self.stop_event.wait(self.interval)
        return ticks

    def stop(self) -> None:
        self.stop_event.set()


def progress_bar(remaining: int, width: int = BAR_WIDTH) -> str:
    filled = round(width * remaining / DEFAULT_TIME_STEP)
    return "#" * filled + "." * (width - filled)


def format_rows(rows: List[CodeRow]) -> str:
    """Plain-text table: one line per account plus the shared countdown."""
    if not rows:
        return "No accounts yet. Add one with: authenticator add --label NAME --secret KEY"
    width = max(len(_title(row)) for row in rows)
    lines = [f"{_title(row):<{width}}  {row.code or PLACEHOLDER_CODE}" for row in rows]
    remaining = rows[0].remaining
    lines.append(f"[{progress_bar(remaining)}] {remaining:2d}s left")
    return "\n".join(lines)


def _title(row: CodeRow) -> str:
    return f"{row.issuer}: {row.label}" if row.issuer else row.label
