"""Half-open byte intervals used to address document text."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Interval:
    """Byte-offset range ``[start, end)`` into a document."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Interval start must be non-negative, got {self.start}")
        if self.start > self.end:
            raise ValueError(f"Interval start {self.start} exceeds end {self.end}")

    @classmethod
    def empty_at(cls, offset: int) -> "Interval":
        return cls(offset, offset)

    @property
    def length(self) -> int:
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def fits(self, length: int) -> bool:
        """Return whether the interval lies within a document of ``length`` bytes."""

        return self.end <= length


__all__ = ["Interval"]
