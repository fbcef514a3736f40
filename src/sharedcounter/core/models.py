from dataclasses import dataclass
from typing import Any, Dict

from ..errors import CounterDecodeError


@dataclass
class Counter:
    number: int = 0

    @classmethod
    def new(cls) -> "Counter":
        return cls(number=0)

    def get(self) -> int:
        return self.number

    def set(self, number: int) -> None:
        self.number = number

    def increment(self) -> None:
        self.number += 1

    def copy(self) -> "Counter":
        return Counter(number=self.number)

    def to_dict(self) -> Dict[str, int]:
        return {"number": self.number}

    @classmethod
    def from_dict(cls, data: Any) -> "Counter":
        if not isinstance(data, dict) or "number" not in data:
            raise CounterDecodeError(f"Expected an object with a 'number' field, got {data!r}")
        number = data["number"]
        # bool is an int subclass
        if isinstance(number, bool) or not isinstance(number, int):
            raise CounterDecodeError(f"'number' must be an integer, got {number!r}")
        return cls(number=number)
