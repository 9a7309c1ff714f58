"""Parameter objects for the node's RPC commands."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Optional

from clnkit.rpctypes import U64_MAX, RouteItem


def _to_json(value: Any) -> Any:
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return to_json()
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    return value


@dataclass(frozen=True)
class AmountOrAll:
    """Either an amount in satoshi or every available coin."""

    value: Optional[int] = None

    def __post_init__(self) -> None:
        if self.value is None:
            return
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError("amount must be an integer")
        if not 0 <= self.value <= U64_MAX:
            raise ValueError(f"amount {self.value} is out of range")

    @classmethod
    def all(cls) -> "AmountOrAll":
        """Spend all available funds."""
        return cls(None)

    @classmethod
    def amount(cls, value: int) -> "AmountOrAll":
        """Spend exactly `value` satoshi."""
        if value is None:
            raise ValueError("amount must be an integer")
        return cls(value)

    @property
    def is_all(self) -> bool:
        return self.value is None

    def to_json(self) -> Any:
        """Return "all" or the amount."""
        return "all" if self.value is None else self.value


class RequestParams:
    """Base of the parameter objects; unset optional fields are left out."""

    def to_params(self) -> dict[str, Any]:
        """Return the JSON object sent as the request's params."""
        out: dict[str, Any] = {}
        for spec in fields(self):  # type: ignore[arg-type]
            value = getattr(self, spec.name)
            if value is not None:
                out[spec.name] = _to_json(value)
        return out


@dataclass(frozen=True)
class GetInfo(RequestParams):
    """'getinfo' command."""


@dataclass(frozen=True)
class FeeRates(RequestParams):
    """'feerates' command."""

    style: str


@dataclass(frozen=True)
class ListNodes(RequestParams):
    """'listnodes' command."""

    id: Optional[str] = None


@dataclass(frozen=True)
class ListChannels(RequestParams):
    """'listchannels' command."""

    short_channel_id: Optional[str] = None
    source: Optional[str] = None
    destination: Optional[str] = None


@dataclass(frozen=True)
class Help(RequestParams):
    """'help' command."""

    command: Optional[str] = None


@dataclass(frozen=True)
class GetLog(RequestParams):
    """'getlog' command."""

    level: Optional[str] = None


@dataclass(frozen=True)
class ListConfigs(RequestParams):
    """'listconfigs' command."""

    config: Optional[str] = None


@dataclass(frozen=True)
class ListPeers(RequestParams):
    """'listpeers' command."""

    id: Optional[str] = None
    level: Optional[str] = None


@dataclass(frozen=True)
class ListInvoices(RequestParams):
    """'listinvoices' command."""

    label: Optional[str] = None
    invstring: Optional[str] = None
    payment_hash: Optional[str] = None
    offer_id: Optional[str] = None


@dataclass(frozen=True)
class CreateInvoice(RequestParams):
    """'createinvoice' command."""

    invstring: str
    label: str
    preimage: str


@dataclass(frozen=True)
class Invoice(RequestParams):
    """'invoice' command with an amount."""

    amount_msat: int
    label: str
    description: str
    preimage: Optional[str] = None
    expiry: Optional[int] = None


@dataclass(frozen=True)
class AnyInvoice(RequestParams):
    """'invoice' command without a fixed amount."""

    amount_msat: str
    label: str
    description: str
    preimage: Optional[str] = None
    expiry: Optional[int] = None


@dataclass(frozen=True)
class DelInvoice(RequestParams):
    """'delinvoice' command."""

    label: str
    status: str


@dataclass(frozen=True)
class DelExpiredInvoice(RequestParams):
    """'delexpiredinvoice' command."""

    maxexpirytime: Optional[int] = None


@dataclass(frozen=True)
class AutoCleanInvoice(RequestParams):
    """'autocleaninvoice' command."""

    cycle_seconds: Optional[int] = None
    expired_by: Optional[int] = None


@dataclass(frozen=True)
class WaitAnyInvoice(RequestParams):
    """'waitanyinvoice' command."""

    lastpay_index: Optional[int] = None


@dataclass(frozen=True)
class WaitInvoice(RequestParams):
    """'waitinvoice' command."""

    label: str


@dataclass(frozen=True)
class Pay(RequestParams):
    """'pay' command."""

    bolt11: str
    msatoshi: Optional[int] = None
    description: Optional[str] = None
    riskfactor: Optional[float] = None
    maxfeepercent: Optional[float] = None
    exemptfee: Optional[int] = None
    retry_for: Optional[int] = None
    maxdelay: Optional[int] = None


@dataclass(frozen=True)
class SendPay(RequestParams):
    """'sendpay' command."""

    route: list[RouteItem]
    payment_hash: str
    description: Optional[str] = None
    msatoshi: Optional[int] = None


@dataclass(frozen=True)
class WaitSendPay(RequestParams):
    """'waitsendpay' command."""

    payment_hash: str
    timeout: int


@dataclass(frozen=True)
class ListSendPays(RequestParams):
    """'listsendpays' command."""

    bolt11: Optional[str] = None
    payment_hash: Optional[str] = None


@dataclass(frozen=True)
class DecodePay(RequestParams):
    """'decodepay' command."""

    bolt11: str
    description: Optional[str] = None


@dataclass(frozen=True)
class GetRoute(RequestParams):
    """'getroute' command."""

    id: str
    msatoshi: int
    riskfactor: float
    cltv: Optional[int] = None
    fromid: Optional[str] = None
    fuzzpercent: Optional[float] = None
    seed: Optional[str] = None


@dataclass(frozen=True)
class Connect(RequestParams):
    """'connect' command."""

    id: str
    host: Optional[str] = None


@dataclass(frozen=True)
class Disconnect(RequestParams):
    """'disconnect' command."""

    id: str


@dataclass(frozen=True)
class FundChannel(RequestParams):
    """'fundchannel' command."""

    id: str
    amount: AmountOrAll
    feerate: Optional[int] = None


@dataclass(frozen=True)
class Close(RequestParams):
    """'close' command."""

    id: str
    force: Optional[bool] = None
    timeout: Optional[int] = None


@dataclass(frozen=True)
class Ping(RequestParams):
    """'ping' command."""

    id: str
    len: Optional[int] = None
    pongbytes: Optional[int] = None


@dataclass(frozen=True)
class ListFunds(RequestParams):
    """'listfunds' command."""


@dataclass(frozen=True)
class Withdraw(RequestParams):
    """'withdraw' command."""

    destination: str
    satoshi: AmountOrAll
    feerate: Optional[int] = None
    minconf: Optional[int] = None


@dataclass(frozen=True)
class NewAddr(RequestParams):
    """'newaddr' command."""

    addresstype: Optional[str] = None


@dataclass(frozen=True)
class Stop(RequestParams):
    """'stop' command."""