"""
Reporting

Components never print on their own; they receive a Reporter and hand it
structured events. The reporter keeps every event (so callers and tests can
inspect them) and echoes them to a stream the same way the command line
tools always did: warnings unconditionally, debug messages only when verbose.
"""

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TextIO

DEBUG = "debug"
WARNING = "warning"


@dataclass(frozen=True)
class ReportEvent:
    """A single reported event."""
    severity: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)


class Reporter:
    """
    Collects ReportEvents and echoes them to a text stream.

    Args:
        name: Prefix used when echoing (usually the command name)
        verbose: Echo debug events as well as warnings
        stream: Output stream (defaults to stderr at echo time)
        echo: Set to False to only record events
    """

    def __init__(self,
                 name: str = "cdocsync",
                 verbose: bool = False,
                 stream: Optional[TextIO] = None,
                 echo: bool = True):
        self.name = name
        self.verbose = verbose
        self.stream = stream
        self.echo = echo
        self.events: List[ReportEvent] = []

    def debug(self, message: str, **context) -> ReportEvent:
        return self._report(DEBUG, message, context)

    def warning(self, message: str, **context) -> ReportEvent:
        return self._report(WARNING, message, context)

    @property
    def warnings(self) -> List[ReportEvent]:
        """All warning events recorded so far."""
        return [event for event in self.events if event.severity == WARNING]

    def _report(self, severity: str, message: str, context: Dict[str, Any]) -> ReportEvent:
        event = ReportEvent(severity, message, context)
        self.events.append(event)
        if self.echo and (severity == WARNING or self.verbose):
            stream = self.stream if self.stream is not None else sys.stderr
            prefix = "⚠️  " if severity == WARNING else ""
            print(f"{prefix}{self.name}: {message}", file=stream)
        return event


def silent_reporter() -> Reporter:
    """Reporter that records events without echoing them."""
    return Reporter(echo=False)
