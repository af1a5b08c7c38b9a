"""
API routes for ticket statistics (technicians only)
"""
from fastapi import APIRouter, Depends
from typing import List

from helpdesk.api.deps import get_auth_context, get_helpdesk
from helpdesk.schemas.estadisticas import SummaryResponse, TypeCount
from helpdesk.services.helpdesk import HelpdeskService
from helpdesk.services.identity import AuthContext


router = APIRouter(prefix="/estadisticas", tags=["Statistics"])


@router.get("", response_model=SummaryResponse)
def get_summary(
    caller: AuthContext = Depends(get_auth_context),
    helpdesk: HelpdeskService = Depends(get_helpdesk),
):
    """Ticket totals by estado"""
    return SummaryResponse(**helpdesk.summary(caller))


@router.get("/tipos", response_model=List[TypeCount])
def get_by_type(
    caller: AuthContext = Depends(get_auth_context),
    helpdesk: HelpdeskService = Depends(get_helpdesk),
):
    """Ticket count per tipo, most frequent first"""
    return [TypeCount(tipo=tipo, cantidad=count) for tipo, count in helpdesk.by_type(caller)]
