from pathlib import Path
from typing import Dict, Optional, Tuple

import solcx
from loguru import logger
from web3 import Web3, HTTPProvider
from web3.exceptions import TimeExhausted
from eth_typing import ABI

import deployconf.config as config
from deployconf.networks import (
    WILDCARD_NETWORK_ID,
    ConfigurationRoot,
    LocalNetwork,
    get_configuration,
)
from deployconf.utils import save_to_file, get_solc_version, get_file_content


class NetworkMismatchError(Exception):
    pass


class Deployer:
    def __init__(self, network: str, configuration: Optional[ConfigurationRoot] = None):
        """Connects to the named network.

        Remote providers are built here, this is the point where the
        network is selected.

        Args:
            network (str): name of a network in the configuration
            configuration (ConfigurationRoot): defaults to `get_configuration()`
        """
        self.configuration = configuration or get_configuration()
        self.network_name = network
        self.network = self.configuration.get_network(network)

        if isinstance(self.network, LocalNetwork):
            self.provider = None
            self.web3 = Web3(
                HTTPProvider(
                    endpoint_uri=self.network.rpc_url,
                    request_kwargs={
                        "timeout": config.NODE_TIMEOUT
                    }
                )
            )
        else:
            self.provider = self.network.provider()
            self.web3 = self.provider.web3
        logger.info(f"Selected network {network} (id {self.network.network_id}).")

    @property
    def sender(self) -> Optional[str]:
        if self.provider is not None:
            if self.provider.accounts:
                return self.provider.get_address(0)
            return None
        accounts = self.web3.eth.accounts
        return accounts[0] if accounts else None

    def check_network_id(self) -> None:
        expected = self.network.network_id
        if expected == WILDCARD_NETWORK_ID:
            return
        actual = str(self.web3.net.version)
        if actual != expected:
            raise NetworkMismatchError(
                f"Network {self.network_name} expects id {expected}, node reports {actual}"
            )

    def transaction_defaults(self, gas_limit: Optional[int] = None) -> Dict:
        transaction = {}
        sender = self.sender
        if sender:
            transaction["from"] = sender
        else:
            logger.warning(f"No sender account for {self.network_name}, leaving \"from\" to the node.")
        gas = gas_limit or getattr(self.network, "gas", None)
        if gas:
            transaction["gas"] = gas
        gas_price = getattr(self.network, "gas_price", None)
        if gas_price:
            transaction["gasPrice"] = gas_price
        return transaction

    def deploy_contract(self, bytecode: str, abi: ABI, gas_limit: Optional[int] = None) -> str:
        """Deploy a contract and wait for its address."""

        contract = self.web3.eth.contract(bytecode=bytecode, abi=abi)
        transaction = self.transaction_defaults(gas_limit)

        txn_hash = contract.constructor().transact(transaction)
        try:
            contract_address = self.web3.eth.wait_for_transaction_receipt(
                txn_hash, timeout=config.RECEIPT_TIMEOUT).contractAddress
        except TimeExhausted:
            logger.error(f"Deploy transaction {txn_hash.hex()} was not mined on {self.network_name}")
            raise
        logger.info(
            f"Deploy contract by {transaction.get('from')}, transaction: {txn_hash.hex()}.")
        return contract_address

    def compile_contract_file(self, file_path: Path) -> Tuple[str, ABI]:
        solc_v = get_solc_version()
        source, file = get_file_content(file_path)
        spec = {
            "language": "Solidity",
            "sources": {
                file: {
                    "content": source
                }
            },
            "settings": {
                "optimizer": self.configuration.solc.optimizer,
                "outputSelection": {
                    "*": {
                        "*": [
                            "metadata", "evm.bytecode", "abi"
                        ]
                    }
                }
            }
        }
        out = solcx.compile_standard(spec, allow_paths=[file_path.absolute().parent.as_posix()], solc_version=solc_v)
        compiled = out["contracts"][file][file_path.stem]
        logger.info(f"Compiled {file} with solc {solc_v}.")
        return compiled["evm"]["bytecode"]["object"], compiled["abi"]

    @staticmethod
    def save_contract_artifact(name: str, data: Dict) -> Path:
        path = Path(f"{config.BUILD_PATH}/{name}.json")
        save_to_file(path, data)
        return path
