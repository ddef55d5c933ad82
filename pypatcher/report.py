#!/usr/bin/env python3

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

TABLE_FIELDS = ["item_id", "status", "message"]


class ItemResult(BaseModel):
    """Outcome of processing one patch file."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    status: int
    message: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status <= 299 or self.status == 304


class Envelope(BaseModel):
    """Status, message, payload and metadata of a whole run."""

    status: int
    message: str
    payload: Any = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status <= 299 or self.status == 304

    @property
    def results(self) -> list[ItemResult]:
        if not isinstance(self.payload, list):
            return []
        return [ItemResult.model_validate(r) for r in self.payload]


class BatchReport:
    """Append-only, ordered list of per-file results."""

    def __init__(self):
        self._results: list[ItemResult] = []

    def add_result(self, item_id: str, status: int, message: str) -> ItemResult:
        result = ItemResult(item_id=item_id, status=status, message=message)
        self._results.append(result)
        return result

    @property
    def results(self) -> tuple[ItemResult, ...]:
        return tuple(self._results)

    def __len__(self) -> int:
        return len(self._results)


def finalize_report(results: tuple[ItemResult, ...] | list[ItemResult]) -> Envelope:
    """Shape per-file results into the run's envelope.

    All successful or already in place (or nothing to do) gives 200, a mix
    of those and failures gives 207, and when nothing succeeded the envelope takes
    the status and message of the last result.
    """
    num_ok = sum(1 for r in results if r.is_success)
    num_nok = len(results) - num_ok

    if num_nok == 0:
        status, message = 200, "All success"
    elif num_ok:
        status, message = 207, "Partial success"
    else:
        status, message = results[-1].status, results[-1].message

    return Envelope(
        status=status,
        message=message,
        payload=[r.model_dump() for r in results],
        metadata={"table.fields": list(TABLE_FIELDS)},
    )
