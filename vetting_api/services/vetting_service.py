"""
Vetting table service - validates requests, calls the chain and shapes results.
"""
import json
import logging
import re
import secrets
import string
import time
from typing import Any, Dict, List, Optional

from ..core.chain import ChainClient, ChainClientError
from ..core.config import Settings
from ..core.keys import Ed25519Keypair
from ..core.results import Failure, FailureKind, Result, Success, utc_timestamp
from ..schemas.vetting_table import FetchedTable, InitializedTable

logger = logging.getLogger(__name__)

OBJECT_ID_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")
OBJECT_ID_EXAMPLE = "0x" + "a1b2c3d4" * 8

INITIALIZE_MODULE = "vetting"
INITIALIZE_FUNCTION = "initialize_vetting_table"
VETTING_TABLE_TYPE = "VettingTable"

INITIALIZE_OPTIONS = {"showObjectChanges": True, "showEffects": True, "showEvents": True}
FETCH_OPTIONS = {"showContent": True, "showType": True}

_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def is_object_id(value: str) -> bool:
    return bool(OBJECT_ID_PATTERN.match(value))


def generate_organization_id(prefix: str = "BRAAV") -> str:
    """
    Advisory organization label: `<prefix>_<epoch millis>_<6 random chars>`.

    Not checked for collisions; the chain object id is the canonical identifier.
    """
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def find_created_vetting_table(object_changes: Any) -> Optional[str]:
    """Return the object id of the first created VettingTable, if any."""
    if not isinstance(object_changes, list):
        return None
    for change in object_changes:
        if not isinstance(change, dict):
            continue
        object_type = change.get("objectType")
        if (
            change.get("type") == "created"
            and isinstance(object_type, str)
            and VETTING_TABLE_TYPE in object_type
        ):
            return change.get("objectId")
    return None


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)


def _upstream_details(error: Exception) -> Dict[str, Any]:
    details = {}
    code = getattr(error, "code", None)
    cause = getattr(error, "cause", None) or error.__cause__
    if code is not None:
        details["errorCode"] = _json_safe(code)
    if cause is not None:
        details["cause"] = _json_safe(cause)
    return details


class VettingTableService:
    """Gateway between the HTTP routes and the chain client."""

    def __init__(self, chain_client: ChainClient, signer: Optional[Ed25519Keypair], settings: Settings):
        self.chain_client = chain_client
        self.signer = signer
        self.settings = settings

    def _missing_configuration(self) -> List[str]:
        missing = []
        if not self.settings.PACKAGE_ID:
            missing.append("PACKAGE_ID")
        if self.signer is None:
            missing.append("MASTER_MNEMONIC")
        return missing

    async def initialize_table(self) -> Result:
        missing = self._missing_configuration()
        if "PACKAGE_ID" in missing:
            return Failure(
                FailureKind.CONFIGURATION,
                "PACKAGE_ID environment variable is not set",
                {"missing": missing},
            )
        if missing:
            return Failure(
                FailureKind.CONFIGURATION,
                "MASTER_MNEMONIC environment variable is not set",
                {"missing": missing},
            )

        organization_id = generate_organization_id(self.settings.ORGANIZATION_ID_PREFIX)
        creator_address = self.signer.sui_address()
        target = f"{self.settings.PACKAGE_ID}::{INITIALIZE_MODULE}::{INITIALIZE_FUNCTION}"

        try:
            result = await self.chain_client.execute_move_call(
                target, [], self.signer, dict(INITIALIZE_OPTIONS)
            )
        except ChainClientError as e:
            logger.error(f"Error initializing vetting table: {e}", exc_info=True)
            return Failure(FailureKind.UPSTREAM, e.message, _upstream_details(e))
        except Exception as e:
            logger.error(f"Error initializing vetting table: {e}", exc_info=True)
            return Failure(
                FailureKind.UPSTREAM,
                str(e) or "Failed to initialize vetting table",
                _upstream_details(e),
            )

        digest = result.get("digest")
        object_changes = result.get("objectChanges")
        vetting_table_id = find_created_vetting_table(object_changes)

        if not vetting_table_id:
            logger.error(
                f"VettingTable not found in transaction {digest}: "
                f"{json.dumps(result, indent=2, default=str)}"
            )
            return Failure(
                FailureKind.CONTRACT_VIOLATION,
                "VettingTable object not found in transaction results",
                {"transactionDigest": digest, "objectChanges": _json_safe(object_changes)},
            )

        logger.info(f"Initialized vetting table {vetting_table_id} for {organization_id} (tx {digest})")
        table = InitializedTable(
            organization_id=organization_id,
            creator_address=creator_address,
            vetting_table_id=vetting_table_id,
            transaction_digest=digest,
            timestamp=utc_timestamp(),
            network=self.settings.network,
        )
        return Success(table.model_dump(by_alias=True))

    async def fetch_table(self, table_id: Optional[str]) -> Result:
        if table_id == "initialize":
            return Failure(
                FailureKind.VALIDATION,
                "Use POST method for initialize endpoint",
                {"hint": "POST /api/vetting-table/initialize"},
            )
        if not table_id or not table_id.strip():
            return Failure(FailureKind.VALIDATION, "Table ID is required")
        if not is_object_id(table_id):
            return Failure(
                FailureKind.VALIDATION,
                "Invalid table ID format",
                {"tableId": table_id, "example": OBJECT_ID_EXAMPLE},
            )

        try:
            response = await self.chain_client.get_object(table_id, dict(FETCH_OPTIONS))
        except Exception as e:
            logger.error(f"Error fetching vetting table {table_id}: {e}", exc_info=True)
            message = getattr(e, "message", None) or str(e) or "Failed to fetch vetting table"
            return Failure(FailureKind.UPSTREAM, message, {"tableId": table_id})

        data = (response or {}).get("data")
        if data is None:
            return Failure(FailureKind.NOT_FOUND, "Vetting table not found", {"tableId": table_id})

        table = FetchedTable(table_id=table_id, vetting_table=data, timestamp=utc_timestamp())
        return Success(table.model_dump(by_alias=True))
