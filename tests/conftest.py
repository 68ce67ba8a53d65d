import stat
from pathlib import Path

import pytest


class FakeTimer:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Just enough of an event loop for timers: ``time`` and ``call_at``."""

    def __init__(self):
        self.now = 0.0
        self.timers = []

    def time(self):
        return self.now

    def call_at(self, when, callback, *args):
        timer = FakeTimer(when, callback, args)
        self.timers.append(timer)
        return timer

    @property
    def pending(self):
        return [t for t in self.timers if not t.cancelled]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = sorted((t for t in self.pending if t.when <= target), key=lambda t: t.when)
            if not due:
                break
            timer = due[0]
            self.timers.remove(timer)
            self.now = timer.when
            timer.callback(*timer.args)
        self.now = target


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_command(tmp_path):
    """Write an executable shell script standing in for the ``home`` command."""

    def _make(body, name="home"):
        path = Path(tmp_path) / name
        path.write_text("#!/bin/sh\n" + body + "\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return _make
