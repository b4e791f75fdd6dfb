from __future__ import annotations

from dataclasses import dataclass, field

_ARROW_LANES = {"l": 0, "d": 1, "u": 2, "r": 3}


def _char_to_lane(char: str) -> int | None:
    """Lane index of a pattern character; -1 marks an empty row, None an invalid char."""
    lowered = char.lower()
    if lowered == "0":
        return -1
    if "1" <= lowered <= "9":
        return int(lowered) - 1
    return _ARROW_LANES.get(lowered)


@dataclass
class Pattern:
    """Rows of lane indices written in the compact notation players use in chat.

    ``[12]34`` is a jump on lanes 0 and 1 followed by single taps on lanes 2 and 3.
    ``l``/``d``/``u``/``r`` name the four arrow lanes and ``0`` is an empty row.
    """

    rows: list[list[int]] = field(default_factory=list)

    @classmethod
    def parse_taps(cls, text: str) -> Pattern:
        """Lenient parse: characters that mean nothing are skipped."""
        rows: list[list[int]] = []
        pos = 0
        while pos < len(text):
            end = text.find("]", pos) if text[pos] == "[" else -1
            if end != -1:
                lanes = [_char_to_lane(char) for char in text[pos + 1 : end]]
                rows.append([lane for lane in lanes if lane is not None and lane >= 0])
                pos = end + 1
                continue
            lane = _char_to_lane(text[pos])
            if lane == -1:
                rows.append([])
            elif lane is not None:
                rows.append([lane])
            pos += 1
        return cls(rows=rows)

    def keymode(self) -> int | None:
        """Number of lanes needed to play the pattern, at least 4; None when empty."""
        lanes = [lane for row in self.rows for lane in row]
        if not lanes:
            return None
        return max(max(lanes) + 1, 4)

    def num_notes(self) -> int:
        return sum(len(row) for row in self.rows)

    def __str__(self) -> str:
        parts: list[str] = []
        for row in self.rows:
            if not row:
                parts.append("0")
            elif len(row) == 1:
                parts.append(str(row[0] + 1))
            else:
                parts.append("[" + "".join(str(lane + 1) for lane in row) + "]")
        return "".join(parts)
