from typing import List

from eth_account import Account
from eth_account.signers.local import LocalAccount
from loguru import logger
from web3 import Web3, HTTPProvider
from web3.middleware import ExtraDataToPOAMiddleware, SignAndSendRawMiddlewareBuilder

import deployconf.config as config
from deployconf.utils import mask_rpc_url

Account.enable_unaudited_hdwallet_features()


class HDWalletProvider:
    """Web3 connection that signs transactions with keys derived from a mnemonic.

    Construction talks to the node straight away, so callers that only
    describe a network should hold a factory and call it when the network
    is actually used.
    """

    def __init__(
            self,
            mnemonic: str,
            rpc_url: str,
            address_index: int = 0,
            num_addresses: int = 1,
            timeout: int = config.NODE_TIMEOUT,
            poa: bool = config.GETH_POA,
    ):
        """
        Args:
            mnemonic (str): BIP-39 seed phrase; an empty phrase gives a provider without accounts
            rpc_url (str): JSON-RPC endpoint of the node
            address_index (int): first derivation index to unlock
            num_addresses (int): how many consecutive accounts to unlock
            timeout (int): HTTP request timeout in seconds
            poa (bool): inject the extra-data middleware for PoA chains
        """
        self.rpc_url = rpc_url
        self.accounts: List[LocalAccount] = self.derive_accounts(mnemonic, address_index, num_addresses)

        self.web3 = Web3(
            HTTPProvider(
                endpoint_uri=rpc_url,
                request_kwargs={
                    "timeout": timeout
                }
            )
        )

        if poa:
            self.web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        if self.accounts:
            self.web3.middleware_onion.inject(
                SignAndSendRawMiddlewareBuilder.build(self.accounts), layer=0
            )
            self.web3.eth.default_account = self.accounts[0].address
        else:
            logger.warning(f"No mnemonic given for {mask_rpc_url(rpc_url)}, transactions will not be signed.")

        if self.web3.is_connected():
            logger.info(f"Connected to {mask_rpc_url(rpc_url)}.")
        else:
            logger.warning(f"Node at {mask_rpc_url(rpc_url)} is not reachable.")

    @staticmethod
    def derive_accounts(mnemonic: str, address_index: int = 0, num_addresses: int = 1) -> List[LocalAccount]:
        if not mnemonic:
            return []
        return [
            Account.from_mnemonic(mnemonic, account_path=f"{config.HD_PATH_PREFIX}{i}")
            for i in range(address_index, address_index + num_addresses)
        ]

    @property
    def addresses(self) -> List[str]:
        return [account.address for account in self.accounts]

    def get_address(self, idx: int = 0) -> str:
        return self.accounts[idx].address
