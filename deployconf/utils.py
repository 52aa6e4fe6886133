import json
import re
from pathlib import Path
from typing import Union, Dict

import solcx
from loguru import logger

import deployconf.config as config

_INFURA_KEY_RE = re.compile(r"(/v3/)[^/]+$")


def mask_rpc_url(url: str) -> str:
    """Hide the API key part of an Infura style endpoint before it reaches the logs."""
    return _INFURA_KEY_RE.sub(r"\1***", url)


def get_solc_version() -> str:
    version = config.SOL_COMPILER_V
    if not any(str(v) == version for v in solcx.get_installed_solc_versions()):
        logger.info(f"Installing solc {version}.")
        solcx.install_solc(version)
    return version


def get_file_content(path_from_root: Path):
    with open(path_from_root.absolute().as_posix(), "r", encoding='utf8') as file:
        raw_contract = file.read()
        return raw_contract, path_from_root.name


def save_to_file(path: Path, data: Union[str, Dict]):
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        data = data if isinstance(data, str) else json.dumps(data, indent=2)
        with open(path, 'w+', encoding='utf8') as file:
            file.write(data)
    except OSError:
        logger.error(f"Can't save file: {path.absolute().as_posix()}")
        raise
