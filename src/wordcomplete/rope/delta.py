"""Document edits expressed as replacements against a known base length.

A :class:`Delta` is the unit of change exchanged with the host: the host
describes user edits with one when notifying ``update`` and the plugin submits
one to mutate the document. Offsets are UTF-8 byte offsets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple

from .interval import Interval


class DeltaError(ValueError):
    """Raised when a delta violates ordering or bounds invariants."""


@dataclass(frozen=True, slots=True)
class Replacement:
    """Replace ``interval`` of the base document with ``text``."""

    interval: Interval
    text: str

    @property
    def inserted_len(self) -> int:
        return len(self.text.encode("utf-8"))


@dataclass(frozen=True, slots=True)
class Delta:
    """Ordered, non-overlapping replacements relative to ``base_len`` bytes."""

    base_len: int
    replacements: Tuple[Replacement, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _validate(self.base_len, self.replacements)

    @classmethod
    def simple_edit(cls, interval: Interval, text: str, base_len: int) -> "Delta":
        builder = DeltaBuilder(base_len)
        builder.replace(interval, text)
        return builder.build()

    def __iter__(self) -> Iterator[Replacement]:
        return iter(self.replacements)

    def __len__(self) -> int:
        return len(self.replacements)

    @property
    def new_length(self) -> int:
        growth = sum(rep.inserted_len - rep.interval.length for rep in self.replacements)
        return self.base_len + growth

    def summary(self) -> Tuple[Interval, int]:
        """Return the changed region of the base document and its new byte length."""

        if not self.replacements:
            return Interval.empty_at(0), 0
        first = self.replacements[0].interval
        last = self.replacements[-1].interval
        covered = Interval(first.start, last.end)
        growth = sum(rep.inserted_len - rep.interval.length for rep in self.replacements)
        return covered, covered.length + growth

    def as_simple_insert(self) -> Optional[str]:
        """Return the inserted text if this delta is a single pure insertion."""

        if len(self.replacements) != 1:
            return None
        only = self.replacements[0]
        if not only.interval.is_empty() or not only.text:
            return None
        return only.text

    def apply(self, text: str) -> str:
        """Apply the delta to ``text`` and return the resulting document."""

        raw = text.encode("utf-8")
        if len(raw) != self.base_len:
            raise DeltaError(
                f"Delta expects a base of {self.base_len} bytes, got {len(raw)}"
            )
        pieces: List[bytes] = []
        cursor = 0
        for rep in self.replacements:
            pieces.append(raw[cursor : rep.interval.start])
            pieces.append(rep.text.encode("utf-8"))
            cursor = rep.interval.end
        pieces.append(raw[cursor:])
        try:
            return b"".join(pieces).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DeltaError("Delta splits a multi-byte character") from exc

    def to_json(self) -> dict[str, Any]:
        """Serialize as ``{"base_len": n, "els": [{"copy": [a, b]}, {"insert": s}]}``."""

        els: List[dict[str, Any]] = []
        cursor = 0
        for rep in self.replacements:
            if rep.interval.start > cursor:
                els.append({"copy": [cursor, rep.interval.start]})
            if rep.text:
                els.append({"insert": rep.text})
            cursor = rep.interval.end
        if cursor < self.base_len:
            els.append({"copy": [cursor, self.base_len]})
        return {"base_len": self.base_len, "els": els}

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "Delta":
        try:
            base_len = payload["base_len"]
            elements = payload["els"]
        except (KeyError, TypeError) as exc:
            raise DeltaError(f"Malformed delta payload: {payload!r}") from exc
        if not isinstance(base_len, int) or not isinstance(elements, Sequence):
            raise DeltaError(f"Malformed delta payload: {payload!r}")

        builder = DeltaBuilder(base_len)
        cursor = 0
        pending = ""
        for element in elements:
            if not isinstance(element, Mapping) or len(element) != 1:
                raise DeltaError(f"Malformed delta element: {element!r}")
            if "copy" in element:
                start, end = _parse_copy(element["copy"])
                if start < cursor:
                    raise DeltaError(f"Copy {start}..{end} goes backwards from {cursor}")
                if start > cursor or pending:
                    builder.replace(Interval(cursor, start), pending)
                cursor = end
                pending = ""
            elif "insert" in element:
                text = element["insert"]
                if not isinstance(text, str):
                    raise DeltaError(f"Insert element must carry text: {element!r}")
                pending += text
            else:
                raise DeltaError(f"Unknown delta element: {element!r}")
        if cursor > base_len:
            raise DeltaError(f"Copy past base length {base_len}")
        if cursor < base_len or pending:
            builder.replace(Interval(cursor, base_len), pending)
        return builder.build()


class DeltaBuilder:
    """Accumulates replacements in ascending order and builds a :class:`Delta`."""

    def __init__(self, base_len: int) -> None:
        if base_len < 0:
            raise DeltaError("base_len must be non-negative")
        self.base_len = base_len
        self._replacements: List[Replacement] = []

    def replace(self, interval: Interval, text: str) -> "DeltaBuilder":
        if not interval.fits(self.base_len):
            raise DeltaError(
                f"Interval {interval.start}..{interval.end} exceeds base length {self.base_len}"
            )
        if self._replacements and interval.start < self._replacements[-1].interval.end:
            previous = self._replacements[-1].interval
            raise DeltaError(
                f"Interval {interval.start}..{interval.end} overlaps or precedes "
                f"{previous.start}..{previous.end}"
            )
        self._replacements.append(Replacement(interval, text))
        return self

    def insert(self, offset: int, text: str) -> "DeltaBuilder":
        return self.replace(Interval.empty_at(offset), text)

    def is_empty(self) -> bool:
        return not self._replacements

    def build(self) -> Delta:
        return Delta(base_len=self.base_len, replacements=tuple(self._replacements))


def _parse_copy(value: Any) -> Tuple[int, int]:
    if (
        not isinstance(value, Sequence)
        or len(value) != 2
        or not all(isinstance(item, int) for item in value)
    ):
        raise DeltaError(f"Copy element must be a [start, end] pair: {value!r}")
    start, end = value
    if start > end:
        raise DeltaError(f"Copy element {start}..{end} is reversed")
    return start, end


def _validate(base_len: int, replacements: Sequence[Replacement]) -> None:
    if base_len < 0:
        raise DeltaError("base_len must be non-negative")
    cursor = 0
    for rep in replacements:
        if rep.interval.start < cursor:
            raise DeltaError("Delta replacements must be ascending and non-overlapping")
        if not rep.interval.fits(base_len):
            raise DeltaError(
                f"Interval {rep.interval.start}..{rep.interval.end} exceeds base length {base_len}"
            )
        cursor = rep.interval.end


__all__ = ["Delta", "DeltaBuilder", "DeltaError", "Replacement"]
