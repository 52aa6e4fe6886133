import os

import dotenv

dotenv.load_dotenv()

SOL_COMPILER_V: str = os.environ.get("SOL_COMPILER_V", "0.4.24")
NODE_TIMEOUT: int = int(os.environ.get("NODE_TIMEOUT", 20))
RECEIPT_TIMEOUT: int = int(os.environ.get("RECEIPT_TIMEOUT", 120))
GETH_POA: bool = os.environ.get("GETH_POA", "").lower() in ("1", "true", "yes")

BUILD_PATH: str = os.environ.get("BUILD_PATH", "build/contracts")

INFURA_URL_TEMPLATE: str = "https://{network}.infura.io/v3/{api_key}"
HD_PATH_PREFIX: str = "m/44'/60'/0'/0/"

DEVELOPMENT_HOST: str = "localhost"
DEVELOPMENT_PORT: int = 7545

ROPSTEN_GAS: int = 4_500_000
ROPSTEN_GAS_PRICE: int = 5_000_000_000  # 5 gwei

OPTIMIZER_ENABLED: bool = True
OPTIMIZER_RUNS: int = 200
