import json
import os

import pytest

from blockscope.abi_store import InMemoryAbiStore, JsonFileAbiStore, default_store_path, normalize_address
from blockscope.exceptions import MalformedAbi
from tests.resources.abi import ERC20_ABI_JSON, WETH_ABI_JSON

DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


def test_normalize_address():
    assert normalize_address(DAI) == DAI.lower()
    assert normalize_address(None) == ""


def test_in_memory_store_normalizes_addresses():
    store = InMemoryAbiStore()
    store.save(DAI, json.loads(ERC20_ABI_JSON))

    assert store.get(DAI.lower()) == store.get(DAI.upper().replace("0X", "0x"))
    assert store.list_addresses() == [DAI.lower()]
    assert store.get_raw(DAI) == json.loads(ERC20_ABI_JSON)


def test_missing_address(random_address):
    store = InMemoryAbiStore()
    assert store.get(random_address()) is None
    assert store.remove(random_address()) is False


def test_save_validates_abi():
    store = InMemoryAbiStore()
    with pytest.raises(MalformedAbi):
        store.save(DAI, {"type": "function"})  # type: ignore[arg-type]

    assert store.list_addresses() == []


def test_json_store_round_trip(abi_store_path):
    store = JsonFileAbiStore(abi_store_path)
    assert store.list_addresses() == []
    assert not os.path.exists(abi_store_path)

    store.save(DAI, json.loads(ERC20_ABI_JSON))
    assert os.path.exists(abi_store_path)

    reloaded = JsonFileAbiStore(abi_store_path)
    assert reloaded.list_addresses() == [DAI.lower()]
    assert [d.name for d in reloaded.get(DAI)] == [d.name for d in store.get(DAI)]

    assert reloaded.remove(DAI)
    assert JsonFileAbiStore(abi_store_path).list_addresses() == []


def test_json_store_replaces_abi(abi_store_path):
    store = JsonFileAbiStore(abi_store_path)
    store.save(DAI, json.loads(ERC20_ABI_JSON))
    store.save(DAI.lower(), json.loads(WETH_ABI_JSON))

    assert JsonFileAbiStore(abi_store_path).get_raw(DAI) == json.loads(WETH_ABI_JSON)


def test_empty_store_file(tmp_path):
    store_file = tmp_path / "contract-abis.json"
    store_file.write_text("")

    assert JsonFileAbiStore(str(store_file)).list_addresses() == []


def test_store_path_from_environment(monkeypatch, abi_store_path):
    monkeypatch.setenv("BLOCKSCOPE_ABI_STORE", abi_store_path)

    assert default_store_path() == abi_store_path
    assert JsonFileAbiStore().path == abi_store_path


def test_corrupt_store_file_is_ignored(tmp_path, caplog):
    store_file = tmp_path / "contract-abis.json"
    store_file.write_text('{"0xabc": [')

    store = JsonFileAbiStore(str(store_file))

    assert store.list_addresses() == []
    assert store.get(DAI) is None
    assert "is not valid JSON" in caplog.text

    # Saving rewrites the corrupt file
    store.save(DAI, json.loads(ERC20_ABI_JSON))
    assert JsonFileAbiStore(str(store_file)).list_addresses() == [DAI.lower()]


def test_invalid_saved_abi_returns_none(abi_store_path, caplog):
    os.makedirs(os.path.dirname(abi_store_path), exist_ok=True)
    with open(abi_store_path, "wt") as abi_file:
        json.dump({DAI: [{"type": "function", "name": "broken", "inputs": [{"name": "x"}]}]}, abi_file)

    store = JsonFileAbiStore(abi_store_path)

    assert store.list_addresses() == [DAI.lower()]
    assert store.get(DAI) is None
    assert store.get_raw(DAI) is not None
    assert f"Saved ABI for {DAI.lower()} is invalid" in caplog.text
