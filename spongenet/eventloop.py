"""Waits for events on file descriptors and runs the matching callbacks."""

from __future__ import annotations

import enum
import select
from dataclasses import dataclass
from typing import Callable, Optional

from .file_descriptor import FileDescriptor

Callback = Callable[[], None]
Interest = Callable[[], bool]


class Direction(enum.IntEnum):
    """Whether a rule waits for its descriptor to be readable or writable."""

    IN = select.POLLIN
    OUT = select.POLLOUT


class EventLoopResult(enum.Enum):
    """Outcome of one call to :meth:`EventLoop.wait_next_event`."""

    SUCCESS = "success"  # at least one rule was triggered
    TIMEOUT = "timeout"  # no rule was triggered before the timeout
    EXIT = "exit"  # every rule is cancelled or uninterested; stop calling


@dataclass(eq=False)
class _Rule:
    fd: FileDescriptor
    direction: Direction
    callback: Callback
    interest: Interest
    cancel: Callback

    def service_count(self) -> int:
        if self.direction is Direction.IN:
            return self.fd.read_count
        return self.fd.write_count


def _always() -> bool:
    return True


def _nothing() -> None:
    return None


class EventLoop:
    """Polls a set of rules and calls back whenever a descriptor is ready.

    Every callback must read from or write to its descriptor, or its
    ``interest`` must turn false; otherwise a busy wait is reported.
    """

    def __init__(self) -> None:
        self._rules: list[_Rule] = []

    def add_rule(
        self,
        fd: FileDescriptor,
        direction: Direction,
        callback: Callback,
        interest: Optional[Interest] = None,
        cancel: Optional[Callback] = None,
    ) -> None:
        """Call ``callback`` whenever ``fd`` is ready in ``direction``.

        ``interest`` decides before each poll whether ``fd`` is watched;
        ``cancel`` runs when the rule is dropped (EOF, hangup or closure).
        """
        self._rules.append(
            _Rule(
                fd=fd.duplicate(),
                direction=Direction(direction),
                callback=callback,
                interest=interest if interest is not None else _always,
                cancel=cancel if cancel is not None else _nothing,
            )
        )

    def _drop(self, rule: _Rule) -> None:
        rule.cancel()
        self._rules.remove(rule)

    def wait_next_event(self, timeout_ms: int) -> EventLoopResult:
        """Poll once (negative timeout waits forever) and run ready callbacks.

        Raises RuntimeError on an error from a polled descriptor or when a
        callback neither serviced its descriptor nor lost interest.
        """
        polled: list[tuple[_Rule, int]] = []
        something_to_poll = False
        for rule in list(self._rules):
            if (rule.direction is Direction.IN and rule.fd.eof) or rule.fd.closed:
                self._drop(rule)
                continue
            if rule.interest():
                events = int(rule.direction)
                something_to_poll = True
            else:
                events = 0  # still registered so that errors are reported
            polled.append((rule, events))

        if not something_to_poll:
            return EventLoopResult.EXIT

        masks: dict[int, int] = {}
        for rule, events in polled:
            masks[rule.fd.fd_num] = masks.get(rule.fd.fd_num, 0) | events
        poller = select.poll()
        for fd_num, mask in masks.items():
            poller.register(fd_num, mask)

        try:
            ready = poller.poll(timeout_ms)
        except InterruptedError:
            return EventLoopResult.EXIT
        if not ready:
            return EventLoopResult.TIMEOUT

        revents_by_fd = dict(ready)
        for rule, events in polled:
            revents = revents_by_fd.get(rule.fd.fd_num, 0)
            if revents & (select.POLLERR | select.POLLNVAL):
                raise RuntimeError("EventLoop: error on polled file descriptor")

            poll_ready = bool(revents & events)
            poll_hup = bool(revents & select.POLLHUP)
            if poll_hup and events and not poll_ready:
                # only a hangup: nothing more will ever be read or written
                self._drop(rule)
                continue

            if poll_ready:
                count_before = rule.service_count()
                rule.callback()
                if count_before == rule.service_count() and rule.interest():
                    raise RuntimeError(
                        "EventLoop: busy wait detected: callback did not read/write fd "
                        "and is still interested"
                    )

        return EventLoopResult.SUCCESS