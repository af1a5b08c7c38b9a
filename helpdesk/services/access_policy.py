"""
Access policy for every helpdesk action.

Single decision table: given the caller, the action and (when the action
targets one ticket) the ticket owner, decide allow/deny. No storage, no
transport; every operation in HelpdeskService and IdentityService asks here.
"""
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

from helpdesk.core.enums import Role
from helpdesk.core.errors import ForbiddenError

if TYPE_CHECKING:
    from helpdesk.services.identity import AuthContext


class Action(str, Enum):
    LIST_TICKETS = "list_tickets"
    READ_TICKET = "read_ticket"
    CREATE_TICKET = "create_ticket"
    UPDATE_TICKET = "update_ticket"
    ASSIGN_TICKET = "assign_ticket"
    DELETE_TICKET = "delete_ticket"
    ADD_COMMENT = "add_comment"
    READ_COMMENTS = "read_comments"
    REGISTER_ACCOUNT = "register_account"
    VIEW_STATISTICS = "view_statistics"


Rule = Callable[["AuthContext", Optional[int]], bool]


def _any_caller(caller: "AuthContext", ticket_owner_id: Optional[int]) -> bool:
    return True


def _technician_only(caller: "AuthContext", ticket_owner_id: Optional[int]) -> bool:
    return caller.role == Role.TECHNICIAN


def _technician_or_owner(caller: "AuthContext", ticket_owner_id: Optional[int]) -> bool:
    if caller.role == Role.TECHNICIAN:
        return True
    return ticket_owner_id is not None and ticket_owner_id == caller.caller_id


POLICY: Dict[Action, Rule] = {
    # plain users are additionally scoped to their own rows by TicketStore.list
    Action.LIST_TICKETS: _any_caller,
    Action.READ_TICKET: _technician_or_owner,
    Action.CREATE_TICKET: _any_caller,
    Action.UPDATE_TICKET: _technician_only,
    Action.ASSIGN_TICKET: _technician_only,
    Action.DELETE_TICKET: _technician_only,
    # no ownership check on comments
    Action.ADD_COMMENT: _any_caller,
    Action.READ_COMMENTS: _technician_or_owner,
    Action.REGISTER_ACCOUNT: _technician_only,
    Action.VIEW_STATISTICS: _technician_only,
}


def authorize(
    caller: "AuthContext",
    action: Action,
    ticket_owner_id: Optional[int] = None
) -> bool:
    """Return True when `caller` may perform `action`."""
    return POLICY[action](caller, ticket_owner_id)


def require(
    caller: "AuthContext",
    action: Action,
    ticket_owner_id: Optional[int] = None
) -> None:
    """Raise ForbiddenError unless `authorize` allows the action."""
    if not authorize(caller, action, ticket_owner_id):
        raise ForbiddenError()
