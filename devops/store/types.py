"""Key-value store contracts for pipeline run data.

``KeyValueStore`` is the raw contract; ``PipelineRunDataStore`` layers named
accessors on top of it using fixed keys:

    stage                    stage data
    status                   run status
    log-all                  the whole log
    log-step-<stage>-<step>  log of a single step
"""

from __future__ import annotations

from abc import ABC, abstractmethod

DATA_KEY_ALL_LOG = "log-all"
DATA_KEY_STAGE = "stage"
DATA_KEY_STATUS = "status"


def step_log_key(stage: int, step: int) -> str:
    """Build the key of a step log from its stage and step numbers.

    Both numbers must be non-negative: the "-" separator cannot occur inside
    a non-negative decimal, so distinct pairs never share a key.

    Raises:
        ValueError: If either number is negative.
    """
    if stage < 0 or step < 0:
        raise ValueError(f"stage and step must be non-negative, got ({stage}, {step})")
    return f"log-step-{stage:d}-{step:d}"


class KeyValueStore(ABC):
    """A string key-value store persisted on demand."""

    @abstractmethod
    def get(self, key: str) -> str:
        """Return the value of ``key``, or "" when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Put ``value`` under ``key`` in memory."""

    @abstractmethod
    def save(self) -> None:
        """Persist the whole mapping to the backing medium."""


class PipelineRunDataStore(KeyValueStore):
    """Pipeline run data accessors built on the key-value contract."""

    def get_stages(self) -> str:
        return self.get(DATA_KEY_STAGE)

    def set_stages(self, stages: str) -> None:
        self.set(DATA_KEY_STAGE, stages)

    def get_status(self) -> str:
        return self.get(DATA_KEY_STATUS)

    def set_status(self, status: str) -> None:
        self.set(DATA_KEY_STATUS, status)

    def get_step_log(self, stage: int, step: int) -> str:
        return self.get(step_log_key(stage, step))

    def set_step_log(self, stage: int, step: int, log: str) -> None:
        self.set(step_log_key(stage, step), log)

    def get_all_log(self) -> str:
        return self.get(DATA_KEY_ALL_LOG)

    def set_all_log(self, log: str) -> None:
        self.set(DATA_KEY_ALL_LOG, log)
