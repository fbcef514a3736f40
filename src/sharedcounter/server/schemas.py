from pydantic import BaseModel, StrictInt

from ..core.models import Counter


class CounterSchema(BaseModel):
    """Wire form of a Counter."""

    number: StrictInt

    @classmethod
    def from_counter(cls, counter: Counter) -> "CounterSchema":
        return cls(number=counter.get())

    def to_counter(self) -> Counter:
        return Counter(number=self.number)


class ErrorBody(BaseModel):
    error: str
