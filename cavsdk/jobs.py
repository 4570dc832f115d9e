"""Asynchronous job types and polling options."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from .httpclient import Response

# Pulls extra data out of a job response; it never interrupts the job flow.
ExtractorFunc = Callable[["Response"], None]


class JobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"
    ABORTED = "aborted"

    def __str__(self) -> str:
        return self.value

    def is_terminated(self) -> bool:
        """Whether the job has finished: succeeded, failed or aborted."""
        return self in (JobStatus.SUCCESS, JobStatus.ERROR, JobStatus.ABORTED)


@dataclass
class Job:
    id: str = ""
    name: str = ""
    description: str = ""
    href: str = ""
    status: Optional[JobStatus] = None


@dataclass
class JobOptions:
    """How long to wait for a job and how often to poll it."""

    timeout: timedelta = timedelta(minutes=5)
    poll_interval: timedelta = timedelta(seconds=15)
    extractor_func: Optional[ExtractorFunc] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.poll_interval <= timedelta(0):
            raise ValueError(f"poll interval must be greater than 0, got {self.poll_interval}")