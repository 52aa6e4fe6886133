"""Unit tests for the network configuration resolver."""
from unittest.mock import patch

import pytest

from deployconf.networks import (
    ConfigurationRoot,
    LocalNetwork,
    RemoteNetwork,
    SolcSettings,
    UnknownNetworkError,
    build_provider_factory,
    get_configuration,
    infura_url,
)


class TestGetConfiguration:
    """Test the static network mapping."""

    def test_network_ids(self):
        """Test each named network has its fixed id."""
        networks = get_configuration({}).networks

        assert set(networks) == {"development", "ropsten", "mainnet"}
        assert networks["development"].network_id == "*"
        assert networks["ropsten"].network_id == "2"
        assert networks["mainnet"].network_id == "1"

    def test_development_is_local(self):
        """Test development points at the local node."""
        development = get_configuration({}).networks["development"]

        assert isinstance(development, LocalNetwork)
        assert development.host == "localhost"
        assert development.port == 7545
        assert development.rpc_url == "http://localhost:7545"

    def test_remote_gas_settings(self):
        """Test ropsten carries gas limits and mainnet does not."""
        networks = get_configuration({}).networks

        assert isinstance(networks["ropsten"], RemoteNetwork)
        assert networks["ropsten"].gas == 4500000
        assert networks["ropsten"].gas_price == 5000000000
        assert networks["mainnet"].gas is None
        assert networks["mainnet"].gas_price is None

    @pytest.mark.parametrize("env", [
        {},
        {"MNEMONIC": "word " * 12, "INFURA_API_KEY": "abc"},
        {"SOL_COMPILER_V": "0.8.0", "OPTIMIZER_RUNS": "1"},
    ])
    def test_optimizer_is_constant(self, env):
        """Test the optimizer settings ignore the environment."""
        configuration = get_configuration(env)

        assert configuration.solc.optimizer == {"enabled": True, "runs": 200}

    def test_no_provider_built(self):
        """Test building the configuration never constructs a provider."""
        with patch("deployconf.networks.HDWalletProvider") as mock_provider:
            get_configuration({"MNEMONIC": "seed", "INFURA_API_KEY": "test123"})

            mock_provider.assert_not_called()

    def test_networks_are_read_only(self):
        """Test the network mapping cannot be modified."""
        configuration = get_configuration({})

        with pytest.raises(TypeError):
            configuration.networks["kovan"] = LocalNetwork(host="localhost", port=8545)

    def test_to_dict_shape(self):
        """Test the toolchain facing dictionary."""
        data = get_configuration({}).to_dict()

        assert data["solc"] == {"optimizer": {"enabled": True, "runs": 200}}
        assert data["networks"]["development"] == {
            "host": "localhost", "port": 7545, "network_id": "*"
        }
        assert data["networks"]["ropsten"]["gas"] == 4500000
        assert data["networks"]["ropsten"]["gas_price"] == 5000000000
        assert callable(data["networks"]["ropsten"]["provider"])
        assert "gas" not in data["networks"]["mainnet"]


class TestGetNetwork:
    """Test lookups by network name."""

    def test_known_network(self):
        """Test a configured name returns its descriptor."""
        configuration = get_configuration({})

        assert configuration.get_network("mainnet") is configuration.networks["mainnet"]

    def test_unknown_network(self):
        """Test an unknown name raises with the configured names listed."""
        configuration = get_configuration({})

        with pytest.raises(UnknownNetworkError) as exc_info:
            configuration.get_network("kovan")

        assert isinstance(exc_info.value, KeyError)
        assert exc_info.value.name == "kovan"
        assert "development, mainnet, ropsten" in str(exc_info.value)

    def test_custom_configuration(self):
        """Test a hand built configuration keeps default compiler settings."""
        configuration = ConfigurationRoot(networks={"local": LocalNetwork(host="127.0.0.1", port=8545)})

        assert configuration.solc == SolcSettings()
        assert configuration.get_network("local").network_id == "*"


class TestBuildProviderFactory:
    """Test deferred provider construction."""

    def test_infura_url(self):
        """Test the Infura endpoint format."""
        assert infura_url("mainnet", "key") == "https://mainnet.infura.io/v3/key"

    def test_ropsten_url(self):
        """Test the factory passes the ropsten endpoint and mnemonic."""
        env = {"MNEMONIC": "seed phrase", "INFURA_API_KEY": "test123"}
        with patch("deployconf.networks.HDWalletProvider") as mock_provider:
            provider = get_configuration(env).networks["ropsten"].provider()

            mock_provider.assert_called_once_with("seed phrase", "https://ropsten.infura.io/v3/test123")
            assert provider is mock_provider.return_value

    def test_missing_mnemonic_becomes_empty(self):
        """Test an unset mnemonic is passed as an empty string."""
        with patch("deployconf.networks.HDWalletProvider") as mock_provider:
            get_configuration({"INFURA_API_KEY": "test123"}).networks["mainnet"].provider()

            mock_provider.assert_called_once_with("", "https://mainnet.infura.io/v3/test123")

    def test_missing_api_key(self):
        """Test an unset API key leaves the key segment empty."""
        with patch("deployconf.networks.HDWalletProvider") as mock_provider:
            build_provider_factory("mainnet", {})()

            mock_provider.assert_called_once_with("", "https://mainnet.infura.io/v3/")

    def test_not_memoized(self):
        """Test each factory call builds a new provider."""
        with patch("deployconf.networks.HDWalletProvider") as mock_provider:
            factory = build_provider_factory("ropsten", {"INFURA_API_KEY": "test123"})
            factory()
            factory()

            assert mock_provider.call_count == 2

    def test_environment_read_at_call_time(self):
        """Test variables set after the factory was made are picked up."""
        env = {}
        factory = build_provider_factory("ropsten", env, provider_cls=lambda m, u: (m, u))
        env.update({"MNEMONIC": "late seed", "INFURA_API_KEY": "late"})

        assert factory() == ("late seed", "https://ropsten.infura.io/v3/late")

    def test_process_environment_default(self, monkeypatch):
        """Test the process environment is used when no mapping is given."""
        monkeypatch.setenv("INFURA_API_KEY", "test123")
        monkeypatch.delenv("MNEMONIC", raising=False)
        factory = build_provider_factory("ropsten", provider_cls=lambda m, u: (m, u))

        assert factory() == ("", "https://ropsten.infura.io/v3/test123")
