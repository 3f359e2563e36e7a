"""
Web3 setup helper - provides common web3 instance utilities.

Public API
----------
get_web3_instance(rpc_url, timeout=30)
    Return a Web3 instance connected to the given RPC URL, cached per URL.
get_deployed_code(w3, address)
    Return the runtime code at ``address``, mapping transport failures to
    ``ServiceUnavailable``.
"""
from __future__ import annotations

import logging

import requests
from web3 import Web3
from web3.exceptions import Web3Exception

from bab_deploy.errors import ServiceUnavailable

__all__ = ["get_web3_instance", "get_deployed_code"]

logger = logging.getLogger(__name__)

# Cached web3 instances, keyed by RPC URL
_w3_instances: dict[str, Web3] = {}


def get_web3_instance(rpc_url: str, timeout: int = 30) -> Web3:
    """
    Get a Web3 instance connected to the specified RPC URL.

    Args:
        rpc_url: JSON-RPC endpoint of the network.
        timeout: HTTP request timeout in seconds.

    Returns:
        Web3 instance
    """
    if rpc_url not in _w3_instances:
        _w3_instances[rpc_url] = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
    return _w3_instances[rpc_url]


def get_deployed_code(w3: Web3, address: str) -> bytes:
    # web3 6 raises JSON-RPC error replies (e.g. -32005 rate limits) as plain ValueError
    try:
        code = w3.eth.get_code(Web3.to_checksum_address(address))
    except (requests.exceptions.RequestException, Web3Exception, OSError, ValueError) as e:
        raise ServiceUnavailable(f"RPC request eth_getCode failed: {e}") from e
    logger.debug(f"eth_getCode({address}) -> {len(code)} bytes")
    return bytes(code)
