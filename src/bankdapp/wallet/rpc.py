"""
JSON-RPC transport for the node behind the wallet.

Lightweight alternative to web3.py: uses httpx for HTTP. The transport only
moves requests and results; it never interprets them. JSON-RPC error objects
are raised as ProviderRpcError so the classifier sees the node's own code and
message, transport failures propagate as httpx exceptions.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


# EIP-1193 provider error codes
USER_REJECTED_REQUEST = 4001
UNAUTHORIZED = 4100
UNSUPPORTED_METHOD = 4200
DISCONNECTED = 4900
CHAIN_DISCONNECTED = 4901

# JSON-RPC code some nodes use for "execution reverted"
EXECUTION_REVERTED = 3


class ProviderRpcError(RuntimeError):
    """Error reported by a wallet provider or the node behind it."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def __repr__(self) -> str:
        return f"ProviderRpcError(code={self.code}, message={self.message!r})"


class JsonRpcTransport:
    """Async JSON-RPC client over one HTTP endpoint."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._ids = itertools.count(1)

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            ProviderRpcError: If the node answers with an error object
            httpx.HTTPError: On transport failure or non-2xx status
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug("rpc -> %s %s", method, payload["params"])

        response = await self._client.post(self.rpc_url, json=payload)
        response.raise_for_status()
        data = response.json()

        if "error" in data:
            error = data["error"] or {}
            raise ProviderRpcError(
                int(error.get("code", -32603)),
                str(error.get("message", "RPC error")),
                error.get("data"),
            )

        return data.get("result")

    async def aclose(self) -> None:
        await self._client.aclose()
