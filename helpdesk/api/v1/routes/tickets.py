"""
API routes for tickets and ticket comments
"""
from fastapi import APIRouter, Body, Depends, Query, Response, status
from typing import List, Optional

from helpdesk.api.deps import get_auth_context, get_helpdesk
from helpdesk.core.errors import ValidationError
from helpdesk.schemas.tickets import (
    AssignRequest,
    CommentCreate,
    CommentResponse,
    CreatedResponse,
    TicketCreate,
    TicketDetail,
    TicketListItem,
    TicketMutationResponse,
    TicketResponse,
    TicketUpdate,
)
from helpdesk.services.helpdesk import HelpdeskService
from helpdesk.services.identity import AuthContext
from helpdesk.services.ticket_store import TicketFilters


router = APIRouter(prefix="/tickets", tags=["Tickets"])


def _optional_id(name: str, raw: Optional[str]) -> Optional[int]:
    # query strings arrive as text; blank means "no filter"
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ValidationError(f"{name} must be an integer") from e


# ========== TICKETS ENDPOINTS ==========

@router.get("", response_model=List[TicketListItem])
def list_tickets(
    estado: Optional[str] = Query(None, description="Filter by estado"),
    prioridad: Optional[str] = Query(None, description="Filter by prioridad"),
    asignado_a: Optional[str] = Query(None, description="Filter by assigned technician id"),
    usuario_id: Optional[str] = Query(None, description="Filter by owner id"),
    caller: AuthContext = Depends(get_auth_context),
    helpdesk: HelpdeskService = Depends(get_helpdesk),
):
    """
    List tickets, newest first.

    Plain users only ever get their own tickets, whatever the filters say.
    """
    filters = TicketFilters(
        estado=estado or None,
        prioridad=prioridad or None,
        asignado_a=_optional_id("asignado_a", asignado_a),
        usuario_id=_optional_id("usuario_id", usuario_id),
    )
    return [
        TicketListItem.from_ticket(ticket, total)
        for ticket, total in helpdesk.list_tickets(caller, filters)
    ]


@router.get("/{ticket_id}", response_model=TicketDetail)
def get_ticket(
    ticket_id: int,
    caller: AuthContext = Depends(get_auth_context),
    helpdesk: HelpdeskService = Depends(get_helpdesk),
):
    """Get one ticket with its comments"""
    ticket, comentarios = helpdesk.get_ticket(caller, ticket_id)
    return TicketDetail.from_ticket(ticket, comentarios)


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_ticket(
    ticket: TicketCreate,
    caller: AuthContext = Depends(get_auth_context),
    helpdesk: HelpdeskService = Depends(get_helpdesk),
):
    """Open a new ticket owned by the caller"""
    created = helpdesk.create_ticket(
        caller,
        tipo=ticket.tipo,
        titulo=ticket.titulo,
        descripcion=ticket.descripcion,
        ubicacion=ticket.ubicacion,
    )
    return CreatedResponse(mensaje="Ticket created successfully", id=created.id)


@router.put("/{ticket_id}", response_model=TicketMutationResponse)
def update_ticket(
    ticket_id: int,
    ticket_update: TicketUpdate,
    caller: AuthContext = Depends(get_auth_context),
    helpdesk: HelpdeskService = Depends(get_helpdesk),
):
    """Change estado, prioridad and/or asignado_a (technicians only)"""
    ticket = helpdesk.update_ticket(caller, ticket_id, ticket_update.to_changes())
    return TicketMutationResponse(
        mensaje="Ticket updated successfully",
        ticket=TicketResponse.model_validate(ticket),
    )


@router.post("/{ticket_id}/asignar", response_model=TicketMutationResponse)
def assign_ticket(
    ticket_id: int,
    request: Optional[AssignRequest] = Body(None),
    caller: AuthContext = Depends(get_auth_context),
    helpdesk: HelpdeskService = Depends(get_helpdesk),
):
    """Assign to a technician (the caller by default); forces estado=in-progress"""
    technician_id = request.tecnico_id if request else None
    ticket = helpdesk.assign_ticket(caller, ticket_id, technician_id)
    return TicketMutationResponse(
        mensaje="Ticket assigned successfully",
        ticket=TicketResponse.model_validate(ticket),
    )


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ticket(
    ticket_id: int,
    caller: AuthContext = Depends(get_auth_context),
    helpdesk: HelpdeskService = Depends(get_helpdesk),
):
    """Delete a ticket and its comments (technicians only)"""
    helpdesk.delete_ticket(caller, ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ========== COMENTARIOS ENDPOINTS ==========

@router.get("/{ticket_id}/comentarios", response_model=List[CommentResponse])
def list_comments(
    ticket_id: int,
    caller: AuthContext = Depends(get_auth_context),
    helpdesk: HelpdeskService = Depends(get_helpdesk),
):
    """Comments of a ticket, oldest first"""
    return [CommentResponse.model_validate(c) for c in helpdesk.list_comments(caller, ticket_id)]


@router.post(
    "/{ticket_id}/comentarios",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    ticket_id: int,
    comment: CommentCreate,
    caller: AuthContext = Depends(get_auth_context),
    helpdesk: HelpdeskService = Depends(get_helpdesk),
):
    """Add a comment to any existing ticket"""
    created = helpdesk.add_comment(caller, ticket_id, comment.texto)
    return CreatedResponse(mensaje="Comment added successfully", id=created.id)
