"""Runtime values. Values are plain data: they keep no reference to the syntax tree that produced them."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Number:
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Str:
    value: str

    def __str__(self):
        return f"\"{self.value}\""


@dataclass(frozen=True)
class Unit:

    def __str__(self):
        return "()"


UNIT = Unit()
