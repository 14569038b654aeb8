from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Optional


class InitializedTable(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, validate_by_name=True, validate_by_alias=True
    )

    organization_id: str
    creator_address: str
    vetting_table_id: str
    vetting_status: str = "INITIALIZED"
    transaction_digest: Optional[str]
    timestamp: str
    network: str


class FetchedTable(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, validate_by_name=True, validate_by_alias=True
    )

    table_id: str
    # Relayed verbatim from the chain node
    vetting_table: Any
    timestamp: str


class HealthResponse(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, validate_by_name=True, validate_by_alias=True
    )

    success: bool = True
    status: str = "OK"
    message: str
    timestamp: str
    runtime_version: str
