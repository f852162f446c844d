"""
Resource guard for a single decode call.

The guard owns the mutable per-call counters (open scopes) and the caller's
deadline. Every check is O(1); nothing is buffered.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field

from ._config import Limits
from ._errors import ArrayTooLarge
from ._errors import Cancelled
from ._errors import NestingTooDeep
from ._errors import PayloadTooLarge
from ._errors import StringTooLong
from ._location import FieldPath
from ._location import Position


@dataclass(frozen=True)
class Deadline:
    """
    Cooperative cancellation for one decode call.

    Expires when the monotonic clock reaches ``expires_at_ns`` or when
    ``event`` is set, whichever comes first. Either may be omitted.
    """

    expires_at_ns: int | None = None
    event: threading.Event | None = None
    clock: Callable[[], int] = field(default=time.monotonic_ns, compare=False)

    @classmethod
    def after(
        cls,
        seconds: float,
        *,
        event: threading.Event | None = None,
        clock: Callable[[], int] = time.monotonic_ns,
    ) -> "Deadline":
        if seconds < 0:
            raise ValueError("seconds must be non-negative")
        return cls(clock() + int(seconds * 1_000_000_000), event, clock)

    @classmethod
    def from_event(cls, event: threading.Event) -> "Deadline":
        return cls(event=event)

    def expired(self) -> bool:
        if self.event is not None and self.event.is_set():
            return True
        if self.expires_at_ns is None:
            return False
        return self.clock() >= self.expires_at_ns

    def check(
        self, path: FieldPath | None = None, position: Position | None = None
    ) -> None:
        """Raises ``Cancelled`` once the deadline has passed."""
        if self.expired():
            reason = (
                "Cancellation requested"
                if self.event is not None and self.event.is_set()
                else "Deadline exceeded"
            )
            raise Cancelled(reason, path=path, position=position)


class LimitGuard:
    """
    Enforces size, depth, array-length and string-length ceilings.

    One guard per parse; not shared between calls.
    """

    def __init__(
        self, limits: Limits, deadline: Deadline | None = None
    ) -> None:
        self.limits = limits
        self.deadline = deadline
        self.depth = 0

    def check_payload(self, size: int) -> None:
        if size > self.limits.max_payload_bytes:
            raise PayloadTooLarge(
                "Payload too large",
                path=FieldPath(),
                position=Position(0, 1, 1),
                expected=f"at most {self.limits.max_payload_bytes} bytes",
                actual=f"{size} bytes",
                hint="split the document or raise max_payload_bytes",
            )

    def enter(self, path: FieldPath, position: Position) -> None:
        """Opens an object or array scope."""
        self.depth += 1
        if self.depth > self.limits.max_nesting_depth:
            raise NestingTooDeep(
                "Nesting too deep",
                path=path,
                position=position,
                expected=f"at most {self.limits.max_nesting_depth} levels",
                actual=f"{self.depth} levels",
                hint="flatten the document structure",
            )
        self.checkpoint(path, position)

    def leave(self) -> None:
        self.depth -= 1

    def check_array_length(
        self, count: int, path: FieldPath, position: Position
    ) -> None:
        if count > self.limits.max_array_elements:
            raise ArrayTooLarge(
                "Array too large",
                path=path,
                position=position,
                expected=f"at most {self.limits.max_array_elements} elements",
                actual=f"more than {self.limits.max_array_elements} elements",
                hint="paginate the collection",
            )

    def check_string_length(
        self, length: int, path: FieldPath | None, position: Position
    ) -> None:
        if length > self.limits.max_string_length:
            raise StringTooLong(
                "String too long",
                path=path,
                position=position,
                expected=f"at most {self.limits.max_string_length} characters",
                actual=f"more than {self.limits.max_string_length} characters",
            )

    def checkpoint(self, path: FieldPath, position: Position | None) -> None:
        if self.deadline is not None:
            self.deadline.check(path, position)
