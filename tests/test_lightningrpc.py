import json
import os
import socket
import tempfile
import threading
from datetime import timedelta
from pathlib import Path

import pytest

from clnkit.errors import JSONDecodeFailure, MalformedResponseError, RpcCallError, TransportError
from clnkit.lightningrpc import LightningRPC, PayOptions
from clnkit.requests import AmountOrAll
from clnkit.rpctypes import MSat

NODE_ID = "02" + "ab" * 32
TXID = "cd" * 32


class FakeNode:
    """A UNIX socket server answering one JSON-RPC request per connection."""

    def __init__(self, path):
        self.path = path
        self.results = {}
        self.errors = {}
        self.requests = []
        self._stop = threading.Event()
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._sock.bind(path)
        self._sock.listen(5)
        self._sock.settimeout(0.05)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            with conn:
                conn.settimeout(5)
                buffer = b""
                request = None
                while request is None:
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    buffer += chunk
                    try:
                        request = json.loads(buffer)
                    except ValueError:
                        continue
                if request is None:
                    continue
                self.requests.append(request)
                method = request["method"]
                message = {"jsonrpc": "2.0", "id": request["id"]}
                if method in self.errors:
                    message["error"] = self.errors[method]
                elif method in self.results:
                    message["result"] = self.results[method]
                else:
                    message["error"] = {"code": -32601, "message": "Unknown command"}
                conn.sendall(json.dumps(message).encode())

    def close(self):
        self._stop.set()
        self._thread.join(timeout=2)
        self._sock.close()


@pytest.fixture
def node():
    with tempfile.TemporaryDirectory(prefix="cln") as directory:
        fake = FakeNode(os.path.join(directory, "rpc"))
        try:
            yield fake
        finally:
            fake.close()


@pytest.fixture
def rpc(node):
    return LightningRPC(node.path)


def getinfo_result():
    return {
        "id": NODE_ID,
        "alias": "SILENTARTIST",
        "color": "02abab",
        "num_peers": 0,
        "num_pending_channels": 0,
        "num_active_channels": 0,
        "num_inactive_channels": 0,
        "address": [],
        "binding": [{"type": "ipv4", "address": "127.0.0.1", "port": 19846}],
        "version": "v23.02",
        "blockheight": 101,
        "fees_collected_msat": "0msat",
        "network": "regtest",
        "lightning-dir": "/tmp/lightning/regtest",
    }


def decodepay_result(amount=None):
    result = {
        "currency": "bcrt",
        "created_at": 1700000000,
        "expiry": 604800,
        "payee": NODE_ID,
        "description": "generate an any invoice",
        "min_final_cltv_expiry": 5,
        "payment_hash": "ef" * 32,
        "signature": "30" * 35,
    }
    if amount is not None:
        result["amount_msat"] = amount
    return result


def test_set_timeout():
    lightning = LightningRPC("/test")
    lightning.client.timeout = timedelta(milliseconds=100)
    assert lightning.client.timeout == timedelta(milliseconds=100)
    assert lightning.client.sockpath == Path("/test")


def test_getinfo(node, rpc):
    node.results["getinfo"] = getinfo_result()
    info = rpc.getinfo()
    assert info.network == "regtest"
    assert info.id == NODE_ID
    assert info.binding[0].port == 19846
    assert str(info.binding[0].address) == "127.0.0.1"
    assert node.requests[0]["method"] == "getinfo"
    assert node.requests[0]["params"] == {}
    assert node.requests[0]["id"] == "0"
    assert node.requests[0]["jsonrpc"] == "2.0"


def test_listfunds(node, rpc):
    node.results["listfunds"] = {
        "outputs": [
            {
                "txid": TXID,
                "output": 0,
                "amount_msat": 100000000000,
                "address": "bcrt1qexampleaddress",
                "status": "confirmed",
                "blockheight": 101,
                "reserved": False,
            }
        ],
        "channels": [],
    }
    funds = rpc.listfunds()
    assert len(funds.channels) == 0
    assert len(funds.outputs) != 0
    assert funds.outputs[0].amount_msat == MSat.parse(100000000000)


def test_connect(node, rpc):
    node.results["connect"] = {"id": NODE_ID, "features": "08a0000a0a69a2"}
    result = rpc.connect(NODE_ID, "127.0.0.1:19846")
    assert result.id == NODE_ID
    assert node.requests[0]["params"] == {"id": NODE_ID, "host": "127.0.0.1:19846"}


def test_fundchannel_with_amount(node, rpc):
    node.results["fundchannel"] = {"tx": "0200", "txid": TXID, "channel_id": "aa" * 32}
    result = rpc.fundchannel(NODE_ID, AmountOrAll.amount(100000), None)
    assert len(result.txid) == 64
    assert node.requests[0]["params"] == {"id": NODE_ID, "amount": 100000}


def test_fundchannel_with_all_funds(node, rpc):
    node.results["fundchannel"] = {"tx": "0200", "txid": TXID, "channel_id": "aa" * 32}
    rpc.fundchannel(NODE_ID, AmountOrAll.all(), 1000)
    assert node.requests[0]["params"] == {"id": NODE_ID, "amount": "all", "feerate": 1000}


def test_listinvoices_without_filters(node, rpc):
    node.results["listinvoices"] = {"invoices": []}
    result = rpc.listinvoices(None, None, None, None)
    assert result.invoices == []
    assert node.requests[0]["params"] == {}


def test_amountless_invoice(node, rpc):
    node.results["invoice"] = {"payment_hash": "ef" * 32, "expires_at": 1700604800, "bolt11": "lnbcrt1example"}
    node.results["decodepay"] = decodepay_result()
    invoice = rpc.invoice(None, "label-one", "generate an any invoice", None, None)
    decoded = rpc.decodepay(invoice.bolt11, None)
    assert decoded.amount_msat is None
    assert node.requests[0]["params"]["amount_msat"] == "any"
    assert node.requests[0]["params"]["label"] == "label-one"
    assert node.requests[1]["params"] == {"bolt11": "lnbcrt1example"}


def test_invoice_with_amount(node, rpc):
    node.results["invoice"] = {"payment_hash": "ef" * 32, "expires_at": 1700604800, "bolt11": "lnbcrt1example"}
    node.results["decodepay"] = decodepay_result("1msat")
    invoice = rpc.invoice(1, "label-two", "generate an any invoice", None, None)
    decoded = rpc.decodepay(invoice.bolt11, None)
    assert decoded.amount_msat == MSat.parse(1)
    assert node.requests[0]["params"]["amount_msat"] == 1


def test_pay_sends_only_given_options(node, rpc):
    node.results["pay"] = {
        "payment_hash": "ef" * 32,
        "destination": NODE_ID,
        "msatoshi": 1000,
        "msatoshi_sent": 1001,
        "created_at": 1700000000.5,
        "status": "complete",
        "payment_preimage": "12" * 32,
        "parts": 1,
    }
    result = rpc.pay("lnbcrt1example", PayOptions(riskfactor=2.0))
    assert result.status == "complete"
    assert result.created_at == 1700000000.5
    assert node.requests[0]["params"] == {"bolt11": "lnbcrt1example", "riskfactor": 2.0}


def test_getroute_params(node, rpc):
    node.results["getroute"] = {"route": []}
    result = rpc.getroute(NODE_ID, 5000, 1.0, cltv=9)
    assert result.route == []
    assert node.requests[0]["params"] == {
        "id": NODE_ID,
        "msatoshi": 5000,
        "riskfactor": 1.0,
        "cltv": 9,
    }


def test_listconfigs_returns_mapping(node, rpc):
    node.results["listconfigs"] = {"network": "regtest", "log-level": "debug"}
    assert rpc.listconfigs() == {"network": "regtest", "log-level": "debug"}


def test_stop_returns_text(node, rpc):
    node.results["stop"] = "Shutdown complete"
    assert rpc.stop() == "Shutdown complete"


def test_generic_call_returns_raw_result(node, rpc):
    node.results["feerates"] = {"perkw": None, "warning": "missing estimates"}
    assert rpc.call("feerates", {"style": "perkw"}) == {"perkw": None, "warning": "missing estimates"}
    assert node.requests[0]["params"] == {"style": "perkw"}


def test_rpc_error_is_raised(node, rpc):
    node.errors["waitinvoice"] = {"code": -1, "message": "Label not found"}
    with pytest.raises(RpcCallError) as info:
        rpc.waitinvoice("missing")
    assert info.value.error.code == -1
    assert info.value.error.message == "Label not found"


def test_null_result_is_malformed(node, rpc):
    node.results["newaddr"] = None
    with pytest.raises(MalformedResponseError):
        rpc.newaddr()


def test_result_of_wrong_shape_fails_to_decode(node, rpc):
    node.results["getinfo"] = {"id": NODE_ID}
    with pytest.raises(JSONDecodeFailure):
        rpc.getinfo()


def test_missing_socket_is_a_transport_error():
    with tempfile.TemporaryDirectory(prefix="cln") as directory:
        rpc = LightningRPC(os.path.join(directory, "absent"))
        with pytest.raises(TransportError):
            rpc.getinfo()