"""
Vetting table endpoints.
"""
from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from ..core.results import to_response
from ..services.vetting_service import VettingTableService
from .routing import LiteralFirstRouter

router = LiteralFirstRouter()


def get_vetting_service(request: Request) -> VettingTableService:
    return request.app.state.vetting_service


@router.post("/initialize")
async def initialize_vetting_table(
    service: VettingTableService = Depends(get_vetting_service),
) -> JSONResponse:
    """
    Create a new VettingTable on chain, signed with the server's master key.
    Returns the new table's object id and the transaction digest.
    """
    return to_response(await service.initialize_table())


@router.get("/{table_id}")
async def get_vetting_table(
    table_id: str,
    service: VettingTableService = Depends(get_vetting_service),
) -> JSONResponse:
    """
    Fetch a VettingTable by object id. The object data is relayed unmodified.
    """
    return to_response(await service.fetch_table(table_id))
