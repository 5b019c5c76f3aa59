"""Touchscreen menu for picking an autonomous routine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol


class Screen(Protocol):
    def set_font(self, font: str) -> None: ...

    def set_fill_color(self, color: str) -> None: ...

    def draw_rectangle(self, x: int, y: int, width: int, height: int) -> None: ...

    def get_string_width(self, text: str) -> int: ...

    def print_at(self, x: int, y: int, text: str) -> None: ...


@dataclass(frozen=True)
class Entry:
    """A selectable box on the screen."""

    x: float
    y: float
    width: float
    height: float
    name: str

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height


class AutoChooser:
    """Lays out one box per routine name and records which one was tapped."""

    WIDTH = 380
    HEIGHT = 220
    PER_LINE = 3
    NUM_LINES = 2
    X_PADDING = 20
    Y_PADDING = 20
    X_START = 50
    Y_START = 10

    def __init__(self, paths: Iterable[str], default: int = 0) -> None:
        self.choice = default
        entry_height = (self.HEIGHT - self.Y_PADDING * (self.NUM_LINES - 1)) // self.NUM_LINES
        entry_width = (self.WIDTH - self.X_PADDING * (self.PER_LINE - 1)) // self.PER_LINE

        self.entries: list[Entry] = []
        x, y = self.X_START, self.Y_START
        for i, name in enumerate(paths, start=1):
            self.entries.append(Entry(float(x), float(y), entry_width, entry_height, name))
            x += entry_width + self.X_PADDING
            if i % self.PER_LINE == 0:
                y += entry_height + self.Y_PADDING
                x = self.X_START

    def update(self, was_pressed: bool, x: int, y: int) -> None:
        """Select the entry under a press; later entries win on overlap."""
        if not was_pressed:
            return
        for index, entry in enumerate(self.entries):
            if entry.contains(x, y):
                self.choice = index

    def draw(self, screen: Screen, first_draw: bool = False, frame_number: int = 0) -> None:
        """Draw every entry, highlighting the current choice."""
        screen.set_font("mono20")
        for index, entry in enumerate(self.entries):
            screen.set_fill_color("green" if index == self.choice else "blue")
            screen.draw_rectangle(int(entry.x), int(entry.y), int(entry.width), int(entry.height))
            text_width = screen.get_string_width(entry.name)
            cx, cy = entry.center
            screen.print_at(int(cx - text_width // 2), int(cy - 10), entry.name)