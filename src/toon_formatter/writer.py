"""Line accumulation for the encoder."""

from typing import List

from .types import Depth


class LineWriter:
    """Collects output lines at a given indentation depth."""

    def __init__(self, indent_size: int) -> None:
        self._indentation = " " * indent_size
        self._lines: List[str] = []

    def push(self, depth: Depth, content: str) -> None:
        self._lines.append(self._indentation * depth + content)

    def to_string(self) -> str:
        return "\n".join(self._lines)
