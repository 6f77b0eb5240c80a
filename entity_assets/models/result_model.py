# entity_assets/models/result_model.py
from typing import List

from pydantic import BaseModel, Field

from ..enums import RenumberPhase


class OperationResult(BaseModel):
    """
    Aggregate outcome of a best-effort bulk filesystem operation.

    Truthy iff every sub-step succeeded; ``failed_paths`` lists the relative
    paths that could not be processed so callers can reconcile.
    """

    success: bool = Field(default=True, description="False if any sub-step failed")
    processed_paths: List[str] = Field(
        default_factory=list, description="Paths handled successfully"
    )
    failed_paths: List[str] = Field(
        default_factory=list, description="Paths whose step failed"
    )

    def __bool__(self) -> bool:
        return self.success

    def record(self, path: str, ok: bool) -> bool:
        """Record one sub-step and return its outcome"""
        if ok:
            self.processed_paths.append(path)
        else:
            self.failed_paths.append(path)
            self.success = False
        return ok

    def merge(self, other: "OperationResult") -> "OperationResult":
        """Fold another result into this one"""
        self.processed_paths.extend(other.processed_paths)
        self.failed_paths.extend(other.failed_paths)
        self.success = self.success and other.success
        return self

    @classmethod
    def failed(cls, path: str) -> "OperationResult":
        return cls(success=False, failed_paths=[path])


class RenumberEntry(BaseModel):
    """One file moving through the two-phase rename."""

    original: str = Field(..., description="Name before renumbering")
    temporary: str = Field(..., description="Collision-free intermediate name")
    final: str = Field(..., description="Name after renumbering")


class RenumberJournal(BaseModel):
    """Durable record of an in-flight gallery renumbering."""

    folder: str = Field(..., description="Relative entity folder")
    phase: RenumberPhase = Field(default=RenumberPhase.TO_TEMPORARY)
    entries: List[RenumberEntry] = Field(default_factory=list)
