"""High-level interface to the node's RPC commands."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from clnkit import requests, responses
from clnkit.client import Client
from clnkit.errors import JSONDecodeFailure
from clnkit.requests import AmountOrAll
from clnkit.rpctypes import RouteItem

PathLike = Union[str, "os.PathLike[str]"]
Amount = Union[AmountOrAll, int, str]


@dataclass(frozen=True)
class PayOptions:
    """Optional arguments of a `pay` request."""

    msatoshi: Optional[int] = None
    description: Optional[str] = None
    riskfactor: Optional[float] = None
    maxfeepercent: Optional[float] = None
    exemptfee: Optional[int] = None
    retry_for: Optional[int] = None
    maxdelay: Optional[int] = None


def _decode(model: Any, result: Any) -> Any:
    try:
        return model.from_dict(result)
    except (ValueError, TypeError) as exc:
        raise JSONDecodeFailure(str(exc)) from exc


def _amount(value: Amount) -> AmountOrAll:
    if isinstance(value, AmountOrAll):
        return value
    if value == "all":
        return AmountOrAll.all()
    if isinstance(value, int) and not isinstance(value, bool):
        return AmountOrAll.amount(value)
    raise TypeError("an amount must be an AmountOrAll, an integer or 'all'")


def _route(route: Iterable[Union[RouteItem, Mapping[str, Any]]]) -> list[RouteItem]:
    return [item if isinstance(item, RouteItem) else RouteItem.from_dict(dict(item)) for item in route]


class LightningRPC:
    """Typed access to the node's RPC interface over its UNIX socket.

    The node usually creates its socket as `.lightning/lightning-rpc` in the
    home directory of the user running it.
    """

    def __init__(self, sockpath: PathLike) -> None:
        self.client = Client(Path(sockpath))

    def __repr__(self) -> str:
        return f"LightningRPC(client={self.client!r})"

    def call(self, method: str, params: Any) -> Any:
        """Send any RPC call and return its raw result."""
        return self.client.send_request(method, params).into_result()

    def _typed(self, model: Any, method: str, params: Any) -> Any:
        return _decode(model, self.call(method, params))

    def getinfo(self) -> responses.GetInfo:
        """Show information about this node."""
        return self._typed(responses.GetInfo, "getinfo", requests.GetInfo())

    def feerates(self, style: str) -> responses.FeeRates:
        """Return fee rate estimates in the style `perkw` or `perkb`."""
        return self._typed(responses.FeeRates, "feerates", requests.FeeRates(style=style))

    def listnodes(self, id: Optional[str] = None) -> responses.ListNodes:
        """Show node `id`, or every node, in the local network view."""
        return self._typed(responses.ListNodes, "listnodes", requests.ListNodes(id=id))

    def listchannels(
        self,
        short_channel_id: Optional[str] = None,
        source: Optional[str] = None,
        destination: Optional[str] = None,
    ) -> responses.ListChannels:
        """Show one channel, or every known channel."""
        params = requests.ListChannels(
            short_channel_id=short_channel_id, source=source, destination=destination
        )
        return self._typed(responses.ListChannels, "listchannels", params)

    def help(self, command: Optional[str] = None) -> responses.Help:
        """List the available commands, or describe one."""
        return self._typed(responses.Help, "help", requests.Help(command=command))

    def getlog(self, level: Optional[str] = None) -> responses.GetLog:
        """Show the logs, optionally at `level` (info, unusual, debug, io)."""
        return self._typed(responses.GetLog, "getlog", requests.GetLog(level=level))

    def listconfigs(self, config: Optional[str] = None) -> responses.ListConfigs:
        """Return every configuration option, or only `config`, as a mapping."""
        result = self.call("listconfigs", requests.ListConfigs(config=config))
        if not isinstance(result, dict):
            raise JSONDecodeFailure("listconfigs result must be a JSON object")
        return result

    def listpeers(self, id: Optional[str] = None, level: Optional[str] = None) -> responses.ListPeers:
        """Show the current peers; with `level`, include their logs."""
        return self._typed(responses.ListPeers, "listpeers", requests.ListPeers(id=id, level=level))

    def listinvoices(
        self,
        label: Optional[str] = None,
        invstring: Optional[str] = None,
        payment_hash: Optional[str] = None,
        offer_id: Optional[str] = None,
    ) -> responses.ListInvoices:
        """Show one invoice, or every invoice."""
        params = requests.ListInvoices(
            label=label, invstring=invstring, payment_hash=payment_hash, offer_id=offer_id
        )
        return self._typed(responses.ListInvoices, "listinvoices", params)

    def invoice(
        self,
        amount_msat: Optional[int],
        label: str,
        description: str,
        preimage: Optional[str] = None,
        expiry: Optional[int] = None,
    ) -> responses.Invoice:
        """Create an invoice; without an amount it accepts any amount."""
        params: requests.RequestParams
        if amount_msat is None:
            params = requests.AnyInvoice(
                amount_msat="any",
                label=label,
                description=description,
                preimage=preimage,
                expiry=expiry,
            )
        else:
            params = requests.Invoice(
                amount_msat=amount_msat,
                label=label,
                description=description,
                preimage=preimage,
                expiry=expiry,
            )
        return self._typed(responses.Invoice, "invoice", params)

    def createinvoice(self, invstring: str, label: str, preimage: str) -> responses.Invoice:
        """Sign and create the invoice `invstring`, resolved with `preimage`."""
        params = requests.CreateInvoice(invstring=invstring, label=label, preimage=preimage)
        return self._typed(responses.Invoice, "createinvoice", params)

    def delinvoice(self, label: str, status: str) -> responses.DelInvoice:
        """Delete the unpaid invoice `label` in state `status`."""
        params = requests.DelInvoice(label=label, status=status)
        return self._typed(responses.DelInvoice, "delinvoice", params)

    def delexpiredinvoice(self, maxexpirytime: Optional[int] = None) -> responses.DelExpiredInvoice:
        """Delete the invoices expired as of `maxexpirytime`, or all expired ones."""
        params = requests.DelExpiredInvoice(maxexpirytime=maxexpirytime)
        return self._typed(responses.DelExpiredInvoice, "delexpiredinvoice", params)

    def autocleaninvoice(
        self, cycle_seconds: Optional[int] = None, expired_by: Optional[int] = None
    ) -> responses.AutoCleanInvoice:
        """Set up periodic removal of expired invoices."""
        params = requests.AutoCleanInvoice(cycle_seconds=cycle_seconds, expired_by=expired_by)
        return self._typed(responses.AutoCleanInvoice, "autocleaninvoice", params)

    def waitanyinvoice(self, lastpay_index: Optional[int] = None) -> responses.WaitAnyInvoice:
        """Wait for the next invoice to be paid after `lastpay_index`."""
        params = requests.WaitAnyInvoice(lastpay_index=lastpay_index)
        return self._typed(responses.WaitAnyInvoice, "waitanyinvoice", params)

    def waitinvoice(self, label: str) -> responses.WaitInvoice:
        """Wait for a payment of the invoice `label`."""
        return self._typed(responses.WaitInvoice, "waitinvoice", requests.WaitInvoice(label=label))

    def pay(self, bolt11: str, options: Optional[PayOptions] = None) -> responses.Pay:
        """Pay a bolt11 invoice."""
        opts = PayOptions() if options is None else options
        params = requests.Pay(
            bolt11=bolt11,
            msatoshi=opts.msatoshi,
            description=opts.description,
            riskfactor=opts.riskfactor,
            maxfeepercent=opts.maxfeepercent,
            exemptfee=opts.exemptfee,
            retry_for=opts.retry_for,
            maxdelay=opts.maxdelay,
        )
        return self._typed(responses.Pay, "pay", params)

    def sendpay(
        self,
        route: Iterable[Union[RouteItem, Mapping[str, Any]]],
        payment_hash: str,
        description: Optional[str] = None,
        msatoshi: Optional[int] = None,
    ) -> responses.SendPay:
        """Send along `route` in return for the preimage of `payment_hash`."""
        params = requests.SendPay(
            route=_route(route),
            payment_hash=payment_hash,
            description=description,
            msatoshi=msatoshi,
        )
        return self._typed(responses.SendPay, "sendpay", params)

    def waitsendpay(self, payment_hash: str, timeout: int) -> responses.WaitSendPay:
        """Wait up to `timeout` seconds for the payment to succeed or fail."""
        params = requests.WaitSendPay(payment_hash=payment_hash, timeout=timeout)
        return self._typed(responses.WaitSendPay, "waitsendpay", params)

    def listsendpays(
        self, bolt11: Optional[str] = None, payment_hash: Optional[str] = None
    ) -> responses.ListSendPays:
        """Show outgoing payments."""
        params = requests.ListSendPays(bolt11=bolt11, payment_hash=payment_hash)
        return self._typed(responses.ListSendPays, "listsendpays", params)

    def decodepay(self, bolt11: str, description: Optional[str] = None) -> responses.DecodePay:
        """Decode a bolt11 invoice."""
        params = requests.DecodePay(bolt11=bolt11, description=description)
        return self._typed(responses.DecodePay, "decodepay", params)

    def getroute(
        self,
        id: str,
        msatoshi: int,
        riskfactor: float,
        cltv: Optional[int] = None,
        fromid: Optional[str] = None,
        fuzzpercent: Optional[float] = None,
        seed: Optional[str] = None,
    ) -> responses.GetRoute:
        """Find a route to `id` for `msatoshi`."""
        params = requests.GetRoute(
            id=id,
            msatoshi=msatoshi,
            riskfactor=riskfactor,
            cltv=cltv,
            fromid=fromid,
            fuzzpercent=fuzzpercent,
            seed=seed,
        )
        return self._typed(responses.GetRoute, "getroute", params)

    def connect(self, id: str, host: Optional[str] = None) -> responses.Connect:
        """Connect to node `id`, at `host` if given."""
        return self._typed(responses.Connect, "connect", requests.Connect(id=id, host=host))

    def disconnect(self, id: str) -> responses.Disconnect:
        """Disconnect from the peer `id`."""
        return self._typed(responses.Disconnect, "disconnect", requests.Disconnect(id=id))

    def fundchannel(self, id: str, amount: Amount, feerate: Optional[int] = None) -> responses.FundChannel:
        """Open a channel to `id` funded with `amount` satoshi, or all funds."""
        params = requests.FundChannel(id=id, amount=_amount(amount), feerate=feerate)
        return self._typed(responses.FundChannel, "fundchannel", params)

    def close(self, id: str, force: Optional[bool] = None, timeout: Optional[int] = None) -> responses.Close:
        """Close the channel with `id`."""
        params = requests.Close(id=id, force=force, timeout=timeout)
        return self._typed(responses.Close, "close", params)

    def ping(self, id: str, len: Optional[int] = None, pongbytes: Optional[int] = None) -> responses.Ping:
        """Send the peer `id` a ping."""
        params = requests.Ping(id=id, len=len, pongbytes=pongbytes)
        return self._typed(responses.Ping, "ping", params)

    def listfunds(self) -> responses.ListFunds:
        """Show the funds of the internal wallet."""
        return self._typed(responses.ListFunds, "listfunds", requests.ListFunds())

    def withdraw(
        self,
        destination: str,
        satoshi: Amount,
        feerate: Optional[int] = None,
        minconf: Optional[int] = None,
    ) -> responses.Withdraw:
        """Send `satoshi`, or all funds, to a Bitcoin address."""
        params = requests.Withdraw(
            destination=destination, satoshi=_amount(satoshi), feerate=feerate, minconf=minconf
        )
        return self._typed(responses.Withdraw, "withdraw", params)

    def newaddr(self, addresstype: Optional[str] = None) -> responses.NewAddr:
        """Get a new address to fund a channel."""
        params = requests.NewAddr(addresstype=addresstype)
        return self._typed(responses.NewAddr, "newaddr", params)

    def stop(self) -> responses.Stop:
        """Shut the node down."""
        result = self.call("stop", requests.Stop())
        if not isinstance(result, str):
            raise JSONDecodeFailure("stop result must be a string")
        return result