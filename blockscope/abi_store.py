import json
import logging
import os
from typing import Any

import click.utils

from blockscope.decoding.abi import load_abi
from blockscope.exceptions import MalformedAbi
from blockscope.types.abi import AbiDescriptor

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("abi_store")

ABI_STORE_FILENAME = "contract-abis.json"


def normalize_address(address: str | None) -> str:
    """Lowercases an address.  None is normalized to an empty string"""
    return address.lower() if address else ""


def default_store_path() -> str:
    """Returns the path of the ABI store file.  Uses BLOCKSCOPE_ABI_STORE if set, otherwise the app dir"""
    if store_path := os.environ.get("BLOCKSCOPE_ABI_STORE"):
        return store_path
    return os.path.join(click.utils.get_app_dir("blockscope"), ABI_STORE_FILENAME)


class InMemoryAbiStore:
    """ABI store keyed by lowercase contract address"""

    _abis: dict[str, list[dict[str, Any]]]

    def __init__(self, abis: dict[str, list[dict[str, Any]]] | None = None):
        self._abis = {}
        for address, abi_json in (abis or {}).items():
            self.save(address, abi_json)

    def get(self, address: str) -> list[AbiDescriptor] | None:
        """Returns the parsed ABI saved for address.  Returns None if no ABI is saved or the saved ABI is invalid"""
        abi_json = self.get_raw(address)
        if abi_json is None:
            return None

        try:
            return load_abi(abi_json)
        except MalformedAbi as e:
            logger.error(f"Saved ABI for {normalize_address(address)} is invalid: {e}")
            return None

    def get_raw(self, address: str) -> list[dict[str, Any]] | None:
        """Returns the ABI JSON entries saved for address, or None"""
        return self._abis.get(normalize_address(address))

    def save(self, address: str, abi_json: list[dict[str, Any]]):
        """
        Validates & saves an ABI for an address, replacing any existing ABI

        :raises MalformedAbi: If abi_json is not a valid ABI
        """
        load_abi(abi_json)
        self._abis[normalize_address(address)] = abi_json

    def remove(self, address: str) -> bool:
        """Removes the ABI saved for address.  Returns False if no ABI was saved"""
        return self._abis.pop(normalize_address(address), None) is not None

    def list_addresses(self) -> list[str]:
        """Returns all addresses with a saved ABI, sorted"""
        return sorted(self._abis.keys())


class JsonFileAbiStore(InMemoryAbiStore):
    """
    ABI store persisted to a JSON file mapping lowercase addresses to ABI JSON.  A missing or empty file is
    treated as an empty store, and the file is created when the first ABI is saved.
    """

    path: str

    def __init__(self, path: str | None = None):
        super().__init__()
        self.path = path or default_store_path()
        self._abis = self._read()

    def _read(self) -> dict[str, list[dict[str, Any]]]:
        if not os.path.exists(self.path) or os.path.getsize(self.path) == 0:
            return {}

        try:
            with open(self.path, "rt") as abi_file:
                abi_json = json.load(abi_file)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"ABI store {self.path} is not valid JSON.  Ignoring stored ABIs: {e}")
            return {}

        if not isinstance(abi_json, dict):
            logger.error(f"ABI store {self.path} is not a JSON object.  Ignoring stored ABIs")
            return {}

        return {normalize_address(address): abi for address, abi in abi_json.items()}

    def _write(self):
        if store_dir := os.path.dirname(self.path):
            os.makedirs(store_dir, exist_ok=True)

        with open(self.path, "wt") as abi_file:
            json.dump(self._abis, abi_file, indent=2)

    def save(self, address: str, abi_json: list[dict[str, Any]]):
        super().save(address, abi_json)
        self._write()
        logger.info(f"Saved ABI for {normalize_address(address)} to {self.path}")

    def remove(self, address: str) -> bool:
        removed = super().remove(address)
        if removed:
            self._write()
        return removed
