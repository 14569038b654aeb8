"""
Sui JSON-RPC client.
"""
import base64
import itertools
import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from .keys import Ed25519Keypair

logger = logging.getLogger(__name__)

EXECUTE_REQUEST_TYPE = "WaitForLocalExecution"


class ChainClientError(Exception):
    """Raised for any failed interaction with the chain node."""

    def __init__(self, message: str, code: Optional[Any] = None, cause: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause


class ChainClient(Protocol):
    async def execute_move_call(
        self,
        target: str,
        arguments: List[Any],
        signer: Ed25519Keypair,
        options: Dict[str, bool],
    ) -> Dict[str, Any]: ...

    async def get_object(self, object_id: str, options: Dict[str, bool]) -> Dict[str, Any]: ...

    async def close(self) -> None: ...


def parse_move_target(target: str) -> tuple:
    """Split `package::module::function` into its three parts."""
    parts = target.split("::")
    if len(parts) != 3 or not all(parts):
        raise ChainClientError(f"Invalid move call target: {target}", code="INVALID_TARGET")
    return tuple(parts)


class SuiClient:
    """Async client for a Sui fullnode."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30.0,
        gas_budget: int = 10_000_000,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.rpc_url = rpc_url
        self.gas_budget = gas_budget
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._ids = itertools.count(1)

    async def close(self) -> None:
        await self._http.aclose()

    async def _call(self, method: str, params: List[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            response = await self._http.post(self.rpc_url, json=payload)
        except httpx.TimeoutException as e:
            raise ChainClientError(f"{method} timed out", code="TIMEOUT", cause=str(e)) from e
        except httpx.RequestError as e:
            raise ChainClientError(f"{method} request failed: {e}", code="NETWORK_ERROR", cause=str(e)) from e

        if response.status_code != 200:
            raise ChainClientError(
                f"{method} returned HTTP {response.status_code}",
                code=f"HTTP_{response.status_code}",
                cause=response.text,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ChainClientError(f"{method} returned invalid JSON", code="MALFORMED_RESPONSE") from e

        if not isinstance(body, dict):
            raise ChainClientError(f"{method} returned an unexpected payload", code="MALFORMED_RESPONSE")

        error = body.get("error")
        if error:
            raise ChainClientError(
                error.get("message") or f"{method} failed",
                code=error.get("code"),
                cause=error.get("data"),
            )

        if "result" not in body:
            raise ChainClientError(f"{method} response has no result", code="MALFORMED_RESPONSE")
        return body["result"]

    async def execute_move_call(
        self,
        target: str,
        arguments: List[Any],
        signer: Ed25519Keypair,
        options: Dict[str, bool],
    ) -> Dict[str, Any]:
        """
        Build, sign and execute a single Move call.

        The node builds the transaction bytes (unsafe_moveCall); they are signed
        locally and submitted with sui_executeTransactionBlock.
        """
        package_id, module, function = parse_move_target(target)
        sender = signer.sui_address()

        built = await self._call(
            "unsafe_moveCall",
            [sender, package_id, module, function, [], list(arguments), None, str(self.gas_budget)],
        )
        tx_bytes_b64 = built.get("txBytes") if isinstance(built, dict) else None
        if not tx_bytes_b64:
            raise ChainClientError("unsafe_moveCall returned no transaction bytes", code="MALFORMED_RESPONSE")

        signature = signer.sign_transaction(base64.b64decode(tx_bytes_b64))
        logger.info(f"Submitting {module}::{function} from {sender}")

        result = await self._call(
            "sui_executeTransactionBlock",
            [tx_bytes_b64, [signature], options, EXECUTE_REQUEST_TYPE],
        )

        if not isinstance(result, dict):
            raise ChainClientError("sui_executeTransactionBlock returned an unexpected payload", code="MALFORMED_RESPONSE")

        status = (result.get("effects") or {}).get("status") or {}
        if status.get("status") == "failure":
            raise ChainClientError(
                status.get("error") or "Transaction execution failed",
                code="EXECUTION_FAILED",
                cause={"digest": result.get("digest")},
            )
        return result

    async def get_object(self, object_id: str, options: Dict[str, bool]) -> Dict[str, Any]:
        return await self._call("sui_getObject", [object_id, options])
