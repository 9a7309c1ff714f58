"""Types shared between RPC requests and responses."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

U64_MAX = 2**64 - 1
_DIGITS = re.compile(r"\+?[0-9]+")
_EXPECTING = 'expected a string ending with "msat" or an unsigned integer'


@dataclass(frozen=True, order=True)
class MSat:
    """An amount in millisatoshi."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("millisatoshi amount must be an integer")
        if not 0 <= self.value <= U64_MAX:
            raise ValueError(f"millisatoshi amount {self.value} is out of range")

    @classmethod
    def parse(cls, value: Any) -> "MSat":
        """Read an amount given as an integer or as a string like "3msat"."""
        if isinstance(value, MSat):
            return value
        if isinstance(value, bool):
            raise ValueError(_EXPECTING)
        if isinstance(value, int):
            if not 0 <= value <= U64_MAX:
                raise ValueError(_EXPECTING)
            return cls(value)
        if isinstance(value, str):
            if not value.endswith("msat"):
                raise ValueError("missing msat suffix")
            number = value[:-4]
            if not _DIGITS.fullmatch(number):
                raise ValueError("not a number")
            amount = int(number)
            if amount > U64_MAX:
                raise ValueError("not a number")
            return cls(amount)
        raise ValueError(_EXPECTING)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value}msat"

    def __repr__(self) -> str:
        return f"{self.value}msat"


def _required(data: dict, name: str) -> Any:
    if name not in data:
        raise ValueError(f"missing field `{name}`")
    return data[name]


def _check_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field `{name}` must be an integer")
    return value


def _check_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field `{name}` must be a string")
    return value


@dataclass
class RouteItem:
    """One hop of a payment route."""

    id: str
    channel: str
    amount_msat: MSat
    delay: int
    direction: Optional[int] = None
    style: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "RouteItem":
        """Build a hop from its decoded JSON form."""
        if not isinstance(data, dict):
            raise ValueError("route item must be a JSON object")
        direction = data.get("direction")
        style = data.get("style")
        return cls(
            id=_check_str(_required(data, "id"), "id"),
            channel=_check_str(_required(data, "channel"), "channel"),
            amount_msat=MSat.parse(_required(data, "amount_msat")),
            delay=_check_int(_required(data, "delay"), "delay"),
            direction=None if direction is None else _check_int(direction, "direction"),
            style=None if style is None else _check_str(style, "style"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the hop."""
        return {
            "id": self.id,
            "channel": self.channel,
            "direction": self.direction,
            "amount_msat": self.amount_msat.value,
            "delay": self.delay,
            "style": self.style,
        }