"""Typed results of the node's RPC commands."""

from __future__ import annotations

import enum
import ipaddress
from dataclasses import MISSING, dataclass, field, fields
from typing import Any, Callable, Optional, Union

from clnkit.rpctypes import U64_MAX, MSat, RouteItem

_U16_MAX = 0xFFFF

Decoder = Callable[[Any], Any]


def _u64(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("expected an unsigned integer")
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"integer {value} is out of range")
    return value


def _u16(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("expected an unsigned integer")
    if not 0 <= value <= _U16_MAX:
        raise ValueError(f"integer {value} is out of range")
    return value


def _f64(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("expected a number")
    return float(value)


def _str(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("expected a string")
    return value


def _bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError("expected a boolean")
    return value


def _msat(value: Any) -> MSat:
    return MSat.parse(value)


def _list_of(decode: Decoder) -> Decoder:
    def decode_list(value: Any) -> list:
        if not isinstance(value, list):
            raise ValueError("expected a JSON array")
        return [decode(item) for item in value]

    return decode_list


def _map_of(decode: Decoder) -> Decoder:
    def decode_map(value: Any) -> dict:
        if not isinstance(value, dict):
            raise ValueError("expected a JSON object")
        return {_str(key): decode(item) for key, item in value.items()}

    return decode_map


def _model(cls: type) -> Decoder:
    return cls.from_dict


def _req(decode: Decoder, key: Optional[str] = None) -> Any:
    return field(default=MISSING, metadata={"decode": decode, "key": key, "optional": False})


def _opt(decode: Decoder, key: Optional[str] = None) -> Any:
    return field(default=None, metadata={"decode": decode, "key": key, "optional": True})


class ResponseModel:
    """Base of the response types; decodes a JSON object field by field."""

    @classmethod
    def from_dict(cls, data: Any) -> Any:
        """Build the response from its decoded JSON form; unknown keys are ignored."""
        if not isinstance(data, dict):
            raise ValueError(f"{cls.__name__} must be a JSON object")
        values: dict[str, Any] = {}
        for spec in fields(cls):  # type: ignore[arg-type]
            key = spec.metadata.get("key") or spec.name
            raw = data.get(key)
            if raw is None:
                if spec.metadata.get("optional"):
                    values[spec.name] = None
                    continue
                raise ValueError(f"missing field `{key}`")
            try:
                values[spec.name] = spec.metadata["decode"](raw)
            except ValueError as exc:
                raise ValueError(f"field `{key}`: {exc}") from exc
        return cls(**values)


class AddressType(enum.Enum):
    """Kind of a network address announced by a node."""

    IPV4 = "ipv4"
    IPV6 = "ipv6"
    TORV2 = "torv2"
    TORV3 = "torv3"


@dataclass(frozen=True)
class NetworkAddress(ResponseModel):
    """A network address with its port."""

    kind: AddressType
    address: Union[ipaddress.IPv4Address, ipaddress.IPv6Address, str]
    port: int

    @classmethod
    def from_dict(cls, data: Any) -> "NetworkAddress":
        """Build an address from its JSON form, tagged by `type`."""
        if not isinstance(data, dict):
            raise ValueError("network address must be a JSON object")
        tag = data.get("type")
        try:
            kind = AddressType(tag)
        except ValueError:
            raise ValueError(f"unknown address type {tag!r}") from None
        for key in ("address", "port"):
            if data.get(key) is None:
                raise ValueError(f"missing field `{key}`")
        raw = _str(data["address"])
        address: Union[ipaddress.IPv4Address, ipaddress.IPv6Address, str]
        if kind is AddressType.IPV4:
            address = ipaddress.IPv4Address(raw)
        elif kind is AddressType.IPV6:
            if "%" in raw:
                raise ValueError(f"invalid IPv6 address {raw!r}")
            address = ipaddress.IPv6Address(raw)
        else:
            address = raw
        return cls(kind=kind, address=address, port=_u16(data["port"]))


_addresses = _list_of(_model(NetworkAddress))


@dataclass(kw_only=True)
class GetInfo(ResponseModel):
    """'getinfo' command."""

    id: str = _req(_str)
    alias: str = _req(_str)
    color: str = _req(_str)
    num_peers: int = _req(_u64)
    num_pending_channels: int = _req(_u64)
    num_active_channels: int = _req(_u64)
    num_inactive_channels: int = _req(_u64)
    address: list[NetworkAddress] = _req(_addresses)
    binding: list[NetworkAddress] = _req(_addresses)
    version: str = _req(_str)
    blockheight: int = _req(_u64)
    fees_collected_msat: MSat = _req(_msat)
    network: str = _req(_str)
    lightning_dir: str = _req(_str, "lightning-dir")
    warning_bitcoind_sync: Optional[str] = _opt(_str)
    warning_lightningd_sync: Optional[str] = _opt(_str)


@dataclass(kw_only=True)
class FeeRatesInner(ResponseModel):
    """Fee rates in one unit style."""

    urgent: Optional[int] = _opt(_u64)
    normal: Optional[int] = _opt(_u64)
    slow: Optional[int] = _opt(_u64)
    opening: int = _req(_u64)
    mutual_close: int = _req(_u64)
    unilateral_close: int = _req(_u64)
    delayed_to_us: int = _req(_u64)
    htlc_resolution: int = _req(_u64)
    penalty: int = _req(_u64)
    min_acceptable: int = _req(_u64)
    max_acceptable: int = _req(_u64)


@dataclass(kw_only=True)
class FeeRatesOnchain(ResponseModel):
    """Estimated on-chain fees."""

    opening_channel_satoshis: int = _req(_u64)
    mutual_close_satoshis: int = _req(_u64)
    unilateral_close_satoshis: int = _req(_u64)
    htlc_timeout_satoshis: int = _req(_u64)
    htlc_success_satoshis: int = _req(_u64)


@dataclass(kw_only=True)
class FeeRates(ResponseModel):
    """'feerates' command."""

    perkb: Optional[FeeRatesInner] = _opt(_model(FeeRatesInner))
    perkw: Optional[FeeRatesInner] = _opt(_model(FeeRatesInner))
    warning: Optional[str] = _opt(_str)
    onchain_fee_estimates: Optional[FeeRatesOnchain] = _opt(_model(FeeRatesOnchain))


@dataclass(kw_only=True)
class ListNodesItem(ResponseModel):
    """A node in 'listnodes'."""

    nodeid: str = _req(_str)
    alias: Optional[str] = _opt(_str)
    color: Optional[str] = _opt(_str)
    last_timestamp: Optional[int] = _opt(_u64)
    features: Optional[str] = _opt(_str)
    addresses: Optional[list[NetworkAddress]] = _opt(_addresses)


@dataclass(kw_only=True)
class ListNodes(ResponseModel):
    """'listnodes' command."""

    nodes: list[ListNodesItem] = _req(_list_of(_model(ListNodesItem)))


@dataclass(kw_only=True)
class ListChannelsItem(ResponseModel):
    """A channel in 'listchannels'."""

    source: str = _req(_str)
    destination: str = _req(_str)
    short_channel_id: str = _req(_str)
    public: bool = _req(_bool)
    amount_msat: MSat = _req(_msat)
    message_flags: int = _req(_u64)
    channel_flags: int = _req(_u64)
    active: bool = _req(_bool)
    last_update: int = _req(_u64)
    base_fee_millisatoshi: int = _req(_u64)
    fee_per_millionth: int = _req(_u64)
    delay: int = _req(_u64)
    htlc_minimum_msat: MSat = _req(_msat)
    htlc_maximum_msat: MSat = _req(_msat)
    features: str = _req(_str)


@dataclass(kw_only=True)
class ListChannels(ResponseModel):
    """'listchannels' command."""

    channels: list[ListChannelsItem] = _req(_list_of(_model(ListChannelsItem)))


@dataclass(kw_only=True)
class HelpItem(ResponseModel):
    """A command described by 'help'."""

    command: str = _req(_str)
    category: str = _req(_str)
    description: str = _req(_str)
    verbose: str = _req(_str)


@dataclass(kw_only=True)
class Help(ResponseModel):
    """'help' command."""

    help: Optional[list[HelpItem]] = _opt(_list_of(_model(HelpItem)))


@dataclass(kw_only=True)
class LogEntry(ResponseModel):
    """A log entry in 'getlog' and 'listpeers'."""

    type_: str = _req(_str, "type")
    num_skipped: Optional[int] = _opt(_u64)
    time: Optional[str] = _opt(_str)
    node_id: Optional[str] = _opt(_str)
    source: Optional[str] = _opt(_str)
    log: Optional[str] = _opt(_str)
    data: Optional[str] = _opt(_str)


@dataclass(kw_only=True)
class GetLog(ResponseModel):
    """'getlog' command."""

    created_at: str = _req(_str)
    bytes_used: int = _req(_u64)
    bytes_max: int = _req(_u64)
    log: list[LogEntry] = _req(_list_of(_model(LogEntry)))


ListConfigs = dict[str, Any]


@dataclass(kw_only=True)
class Htlc(ResponseModel):
    """An HTLC of a channel in 'listpeers'."""

    direction: str = _req(_str)
    id: int = _req(_u64)
    amount_msat: MSat = _req(_msat)
    expiry: int = _req(_u64)
    payment_hash: str = _req(_str)
    state: str = _req(_str)
    local_trimmed: Optional[bool] = _opt(_bool)


@dataclass(kw_only=True)
class Channel(ResponseModel):
    """A channel of a peer in 'listpeers'."""

    state: str = _req(_str)
    scratch_txid: Optional[str] = _opt(_str)
    owner: Optional[str] = _opt(_str)
    short_channel_id: Optional[str] = _opt(_str)
    direction: Optional[int] = _opt(_u64)
    channel_id: str = _req(_str)
    funding_txid: str = _req(_str)
    close_to_addr: Optional[str] = _opt(_str)
    close_to: Optional[str] = _opt(_str)
    private: bool = _req(_bool)
    funding: dict[str, MSat] = _req(_map_of(_msat))
    to_us_msat: MSat = _req(_msat)
    min_to_us_msat: MSat = _req(_msat)
    max_to_us_msat: MSat = _req(_msat)
    total_msat: MSat = _req(_msat)
    dust_limit_msat: MSat = _req(_msat)
    max_total_htlc_in_msat: MSat = _req(_msat)
    their_reserve_msat: MSat = _req(_msat)
    our_reserve_msat: MSat = _req(_msat)
    spendable_msat: MSat = _req(_msat)
    receivable_msat: MSat = _req(_msat)
    minimum_htlc_in_msat: MSat = _req(_msat)
    their_to_self_delay: int = _req(_u64)
    our_to_self_delay: int = _req(_u64)
    max_accepted_htlcs: int = _req(_u64)
    status: list[str] = _req(_list_of(_str))
    in_payments_offered: int = _req(_u64)
    in_offered_msat: MSat = _req(_msat)
    in_payments_fulfilled: int = _req(_u64)
    in_fulfilled_msat: MSat = _req(_msat)
    out_payments_offered: int = _req(_u64)
    out_offered_msat: MSat = _req(_msat)
    out_payments_fulfilled: int = _req(_u64)
    out_fulfilled_msat: MSat = _req(_msat)
    htlcs: list[Htlc] = _req(_list_of(_model(Htlc)))


@dataclass(kw_only=True)
class Peer(ResponseModel):
    """A peer in 'listpeers'."""

    id: str = _req(_str)
    connected: bool = _req(_bool)
    netaddr: Optional[list[str]] = _opt(_list_of(_str))
    features: Optional[str] = _opt(_str)
    channels: list[Channel] = _req(_list_of(_model(Channel)))
    log: Optional[list[LogEntry]] = _opt(_list_of(_model(LogEntry)))


@dataclass(kw_only=True)
class ListPeers(ResponseModel):
    """'listpeers' command."""

    peers: list[Peer] = _req(_list_of(_model(Peer)))


@dataclass(kw_only=True)
class ListInvoice(ResponseModel):
    """An invoice in 'listinvoices'."""

    label: str = _req(_str)
    bolt11: str = _req(_str)
    payment_hash: str = _req(_str)
    amount_msat: Optional[MSat] = _opt(_msat)
    status: str = _req(_str)
    pay_index: Optional[int] = _opt(_u64)
    amount_received_msat: Optional[MSat] = _opt(_msat)
    paid_at: Optional[int] = _opt(_u64)
    payment_preimage: Optional[str] = _opt(_str)
    description: Optional[str] = _opt(_str)
    expires_at: int = _req(_u64)


@dataclass(kw_only=True)
class ListInvoices(ResponseModel):
    """'listinvoices' command."""

    invoices: list[ListInvoice] = _req(_list_of(_model(ListInvoice)))


@dataclass(kw_only=True)
class CreateinvoiceResponse(ResponseModel):
    """'createinvoice' command."""

    label: str = _req(_str)
    bolt11: Optional[str] = _opt(_str)
    bolt12: Optional[str] = _opt(_str)
    payment_hash: str = _req(_str)
    amount_msat: Optional[MSat] = _opt(_msat)
    status: str = _req(_str)
    description: str = _req(_str)
    expires_at: int = _req(_u64)
    pay_index: Optional[int] = _opt(_u64)
    amount_received_msat: Optional[MSat] = _opt(_msat)
    paid_at: Optional[int] = _opt(_u64)
    payment_preimage: Optional[str] = _opt(_str)
    local_offer_id: Optional[str] = _opt(_str)
    invreq_payer_note: Optional[str] = _opt(_str)


@dataclass(kw_only=True)
class Invoice(ResponseModel):
    """'invoice' command."""

    payment_hash: str = _req(_str)
    expires_at: int = _req(_u64)
    bolt11: str = _req(_str)


DelInvoice = ListInvoice


@dataclass(kw_only=True)
class DelExpiredInvoice(ResponseModel):
    """'delexpiredinvoice' command."""


@dataclass(kw_only=True)
class AutoCleanInvoice(ResponseModel):
    """'autocleaninvoice' command."""


WaitAnyInvoice = ListInvoice
WaitInvoice = ListInvoice

_route = _list_of(RouteItem.from_dict)


@dataclass(kw_only=True)
class FailureItem(ResponseModel):
    """A failure reported by 'pay'."""

    message: str = _req(_str)
    type_: str = _req(_str, "type")
    erring_index: int = _req(_u64)
    failcode: int = _req(_u64)
    erring_node: str = _req(_str)
    erring_channel: str = _req(_str)
    channel_update: Optional[str] = _opt(_str)
    route: list[RouteItem] = _req(_route)


@dataclass(kw_only=True)
class Pay(ResponseModel):
    """'pay' command."""

    payment_hash: str = _req(_str)
    destination: str = _req(_str)
    msatoshi: int = _req(_u64)
    msatoshi_sent: int = _req(_u64)
    created_at: float = _req(_f64)
    status: str = _req(_str)
    payment_preimage: str = _req(_str)
    parts: int = _req(_u64)


@dataclass(kw_only=True)
class SendPay(ResponseModel):
    """'sendpay' command."""

    message: Optional[str] = _opt(_str)
    id: int = _req(_u64)
    payment_hash: str = _req(_str)
    partid: Optional[int] = _opt(_u64)
    destination: Optional[str] = _opt(_str)
    amount_msat: Optional[MSat] = _opt(_msat)
    amount_sent_msat: MSat = _req(_msat)
    created_at: int = _req(_u64)
    status: str = _req(_str)
    payment_preimage: Optional[str] = _opt(_str)
    description: Optional[str] = _opt(_str)
    bolt11: Optional[str] = _opt(_str)
    erroronion: Optional[str] = _opt(_str)
    onionreply: Optional[str] = _opt(_str)
    erring_index: Optional[int] = _opt(_u64)
    failcode: Optional[int] = _opt(_u64)
    failcodename: Optional[str] = _opt(_str)
    erring_node: Optional[str] = _opt(_str)
    erring_channel: Optional[str] = _opt(_str)
    erring_direction: Optional[int] = _opt(_u64)
    raw_message: Optional[str] = _opt(_str)


@dataclass(kw_only=True)
class ListSendPaysItem(ResponseModel):
    """A payment in 'listsendpays' and 'waitsendpay'."""

    id: int = _req(_u64)
    payment_hash: str = _req(_str)
    partid: Optional[int] = _opt(_u64)
    destination: Optional[str] = _opt(_str)
    amount_msat: Optional[MSat] = _opt(_msat)
    amount_sent_msat: MSat = _req(_msat)
    created_at: int = _req(_u64)
    status: str = _req(_str)
    payment_preimage: Optional[str] = _opt(_str)
    description: Optional[str] = _opt(_str)
    bolt11: Optional[str] = _opt(_str)
    erroronion: Optional[str] = _opt(_str)


WaitSendPay = ListSendPaysItem


@dataclass(kw_only=True)
class ListSendPays(ResponseModel):
    """'listsendpays' command."""

    payments: list[ListSendPaysItem] = _req(_list_of(_model(ListSendPaysItem)))


@dataclass(kw_only=True)
class Fallback(ResponseModel):
    """A fallback address in 'decodepay'."""

    type_: str = _req(_str, "type")
    addr: str = _req(_str)
    hex: str = _req(_str)


@dataclass(kw_only=True)
class DecodePayRoute(ResponseModel):
    """A route hint hop in 'decodepay'."""

    pubkey: str = _req(_str)
    short_channel_id: str = _req(_str)
    fee_base_msat: int = _req(_u64)
    fee_proportional_millionths: int = _req(_u64)
    cltv_expiry_delta: int = _req(_u64)


@dataclass(kw_only=True)
class Extra(ResponseModel):
    """An extra field in 'decodepay'."""

    tag: str = _req(_str)
    data: str = _req(_str)


@dataclass(kw_only=True)
class DecodePay(ResponseModel):
    """'decodepay' command."""

    currency: str = _req(_str)
    created_at: int = _req(_u64)
    expiry: int = _req(_u64)
    payee: str = _req(_str)
    amount_msat: Optional[MSat] = _opt(_msat)
    description: Optional[str] = _opt(_str)
    description_hash: Optional[str] = _opt(_str)
    min_final_cltv_expiry: int = _req(_u64)
    payment_secret: Optional[str] = _opt(_str)
    features: Optional[str] = _opt(_str)
    fallbacks: Optional[list[Fallback]] = _opt(_list_of(_model(Fallback)))
    routes: Optional[list[list[DecodePayRoute]]] = _opt(
        _list_of(_list_of(_model(DecodePayRoute)))
    )
    extra: Optional[list[Extra]] = _opt(_list_of(_model(Extra)))
    payment_hash: str = _req(_str)
    signature: str = _req(_str)


@dataclass(kw_only=True)
class GetRoute(ResponseModel):
    """'getroute' command."""

    route: list[RouteItem] = _req(_route)


@dataclass(kw_only=True)
class Connect(ResponseModel):
    """'connect' command."""

    id: str = _req(_str)
    features: str = _req(_str)


@dataclass(kw_only=True)
class Disconnect(ResponseModel):
    """'disconnect' command."""


@dataclass(kw_only=True)
class FundChannel(ResponseModel):
    """'fundchannel' command."""

    tx: str = _req(_str)
    txid: str = _req(_str)
    channel_id: str = _req(_str)


@dataclass(kw_only=True)
class Close(ResponseModel):
    """'close' command."""

    tx: str = _req(_str)
    txid: str = _req(_str)
    type_: str = _req(_str, "type")


@dataclass(kw_only=True)
class Ping(ResponseModel):
    """'ping' command."""

    totlen: int = _req(_u64)


@dataclass(kw_only=True)
class ListFundsOutput(ResponseModel):
    """An on-chain output in 'listfunds'."""

    txid: str = _req(_str)
    output: int = _req(_u64)
    redeemscript: Optional[str] = _opt(_str)
    scriptpubkey: Optional[str] = _opt(_str)
    amount_msat: MSat = _req(_msat)
    address: str = _req(_str)
    status: str = _req(_str)
    blockheight: Optional[int] = _opt(_u64)
    reserved: bool = _req(_bool)
    reserved_to_block: Optional[int] = _opt(_u64)


@dataclass(kw_only=True)
class ListFundsChannel(ResponseModel):
    """A channel in 'listfunds'."""

    peer_id: str = _req(_str)
    connected: bool = _req(_bool)
    state: str = _req(_str)
    short_channel_id: Optional[str] = _opt(_str)
    our_amount_msat: MSat = _req(_msat)
    amount_msat: MSat = _req(_msat)
    funding_txid: str = _req(_str)
    funding_output: int = _req(_u64)


@dataclass(kw_only=True)
class ListFunds(ResponseModel):
    """'listfunds' command."""

    outputs: list[ListFundsOutput] = _req(_list_of(_model(ListFundsOutput)))
    channels: list[ListFundsChannel] = _req(_list_of(_model(ListFundsChannel)))


@dataclass(kw_only=True)
class Withdraw(ResponseModel):
    """'withdraw' command."""

    tx: str = _req(_str)
    txid: str = _req(_str)


@dataclass(kw_only=True)
class NewAddr(ResponseModel):
    """'newaddr' command."""

    address: Optional[str] = _opt(_str)
    bech32: Optional[str] = _opt(_str)
    p2sh_segwit: Optional[str] = _opt(_str, "p2sh-segwit")


Stop = str