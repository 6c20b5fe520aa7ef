"""Node connections over web3.py and translation of its failures."""

import logging
from contextlib import contextmanager
from typing import Iterator

import requests
from web3 import Web3
from web3.exceptions import Web3Exception

from .exceptions import RpcError

logger = logging.getLogger(__name__)


def connect(url: str, timeout: float = 30) -> Web3:
    """
    Open a web3 connection to a node endpoint.

    Transport retries are disabled: a failed request surfaces immediately
    as an RpcError from `rpc_errors`.
    """
    provider = Web3.HTTPProvider(
        url,
        request_kwargs={"timeout": timeout},
        exception_retry_configuration=None,
    )
    return Web3(provider)


def _error_code(exc: Web3Exception):
    response = getattr(exc, "rpc_response", None) or {}
    error = response.get("error") if isinstance(response, dict) else None
    return error.get("code") if isinstance(error, dict) else None


@contextmanager
def rpc_errors(method: str) -> Iterator[None]:
    """
    Re-raise transport and node failures of a web3 call as RpcError.

    Args:
        method: Name of the call, used in the error message
    """
    logger.debug("RPC %s", method)
    try:
        yield
    except requests.RequestException as e:
        raise RpcError(f"Network error during RPC call {method}: {e}") from e
    except Web3Exception as e:
        raise RpcError(f"RPC error in {method}: {e}", code=_error_code(e)) from e
