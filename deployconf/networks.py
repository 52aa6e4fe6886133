"""Deployment networks keyed by name.

Remote networks carry a provider factory instead of a provider: building an
:class:`~deployconf.provider.HDWalletProvider` contacts the node, so it only
happens when a deployment picks the network and calls the factory. Every call
builds a fresh provider.
"""
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Union

from loguru import logger

import deployconf.config as config
from deployconf.provider import HDWalletProvider

WILDCARD_NETWORK_ID = "*"

ProviderFactory = Callable[[], HDWalletProvider]


class UnknownNetworkError(KeyError):
    def __init__(self, name: str, known):
        self.name = name
        self.known = sorted(known)
        super().__init__(name)

    def __str__(self):
        return f"Unknown network '{self.name}', configured: {', '.join(self.known)}"


@dataclass(frozen=True)
class LocalNetwork:
    host: str
    port: int
    network_id: str = WILDCARD_NETWORK_ID

    @property
    def rpc_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def to_dict(self) -> Dict:
        return {"host": self.host, "port": self.port, "network_id": self.network_id}


@dataclass(frozen=True)
class RemoteNetwork:
    provider: ProviderFactory
    network_id: str
    gas: Optional[int] = None
    gas_price: Optional[int] = None

    def to_dict(self) -> Dict:
        data = {"provider": self.provider, "network_id": self.network_id}
        if self.gas is not None:
            data["gas"] = self.gas
        if self.gas_price is not None:
            data["gas_price"] = self.gas_price
        return data


NetworkDescriptor = Union[LocalNetwork, RemoteNetwork]


@dataclass(frozen=True)
class SolcSettings:
    optimizer_enabled: bool = config.OPTIMIZER_ENABLED
    optimizer_runs: int = config.OPTIMIZER_RUNS

    @property
    def optimizer(self) -> Dict:
        return {"enabled": self.optimizer_enabled, "runs": self.optimizer_runs}


@dataclass(frozen=True)
class ConfigurationRoot:
    networks: Mapping[str, NetworkDescriptor]
    solc: SolcSettings = field(default_factory=SolcSettings)

    def __post_init__(self):
        object.__setattr__(self, "networks", MappingProxyType(dict(self.networks)))

    def get_network(self, name: str) -> NetworkDescriptor:
        try:
            return self.networks[name]
        except KeyError:
            raise UnknownNetworkError(name, self.networks) from None

    def to_dict(self) -> Dict:
        return {
            "networks": {name: network.to_dict() for name, network in self.networks.items()},
            "solc": {"optimizer": self.solc.optimizer},
        }


def infura_url(network: str, api_key: str) -> str:
    return config.INFURA_URL_TEMPLATE.format(network=network, api_key=api_key)


def build_provider_factory(
        network: str,
        env: Optional[Mapping[str, str]] = None,
        provider_cls: Optional[Callable[[str, str], HDWalletProvider]] = None,
) -> ProviderFactory:
    """Return a callable that builds a signing provider for an Infura network.

    ``MNEMONIC`` and ``INFURA_API_KEY`` are looked up in ``env`` (the process
    environment by default) when the factory is called, not when it is made.
    A missing mnemonic becomes an empty string.

    ``provider_cls`` defaults to :class:`HDWalletProvider`, looked up when the
    factory runs so a patched module attribute is honoured.
    """

    def factory() -> HDWalletProvider:
        environ = os.environ if env is None else env
        api_key = environ.get("INFURA_API_KEY", "")
        if not api_key:
            logger.warning(f"INFURA_API_KEY is not set, the {network} endpoint will reject requests.")
        cls = provider_cls or HDWalletProvider
        return cls(environ.get("MNEMONIC", ""), infura_url(network, api_key))

    return factory


def get_configuration(env: Optional[Mapping[str, str]] = None) -> ConfigurationRoot:
    return ConfigurationRoot(
        networks={
            "development": LocalNetwork(
                host=config.DEVELOPMENT_HOST,
                port=config.DEVELOPMENT_PORT,
                network_id=WILDCARD_NETWORK_ID,
            ),
            "ropsten": RemoteNetwork(
                provider=build_provider_factory("ropsten", env),
                network_id="2",
                gas=config.ROPSTEN_GAS,
                gas_price=config.ROPSTEN_GAS_PRICE,
            ),
            "mainnet": RemoteNetwork(
                provider=build_provider_factory("mainnet", env),
                network_id="1",
            ),
        },
        solc=SolcSettings(),
    )
