from dataclasses import dataclass


@dataclass
class Paginator:
    """Zero-based result offset moving in whole pages of `rows`."""

    rows: int
    offset: int = 0
    total: int = 0

    @property
    def has_next(self) -> bool:
        return self.offset + self.rows < self.total

    @property
    def has_previous(self) -> bool:
        return self.offset > 0

    def next(self) -> bool:
        if not self.has_next:
            return False
        self.offset += self.rows
        return True

    def previous(self) -> bool:
        if not self.has_previous:
            return False
        self.offset = max(0, self.offset - self.rows)
        return True

    def reset(self) -> bool:
        changed = self.offset != 0
        self.offset = 0
        return changed

    def clamp(self, total: int) -> bool:
        """
        Record a fresh match count. If the index shrank under the current
        offset, move to the first row of the last page that still exists.
        Returns True when the offset moved.
        """
        self.total = max(0, total)
        if self.offset < self.total or self.offset == 0:
            return False
        last = ((self.total - 1) // self.rows) * self.rows if self.total else 0
        self.offset = last
        return True
