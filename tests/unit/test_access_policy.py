"""Unit tests for the access policy decision table."""

import pytest

from helpdesk.core.enums import Role
from helpdesk.core.errors import ForbiddenError
from helpdesk.services.access_policy import POLICY, Action, authorize, require
from helpdesk.services.identity import AuthContext

USER = AuthContext(caller_id=1, username="alice", role=Role.USER)
OTHER_USER = AuthContext(caller_id=2, username="bob", role=Role.USER)
TECHNICIAN = AuthContext(caller_id=3, username="tina", role=Role.TECHNICIAN)

TECHNICIAN_ONLY = [
    Action.UPDATE_TICKET,
    Action.ASSIGN_TICKET,
    Action.DELETE_TICKET,
    Action.REGISTER_ACCOUNT,
    Action.VIEW_STATISTICS,
]


class TestAccessPolicy:
    """Test suite for authorize/require."""

    @pytest.mark.unit
    def test_every_action_has_a_rule(self):
        assert set(POLICY) == set(Action)

    @pytest.mark.unit
    @pytest.mark.parametrize("action", list(Action))
    def test_technician_may_do_everything(self, action):
        assert authorize(TECHNICIAN, action, ticket_owner_id=USER.caller_id)

    @pytest.mark.unit
    @pytest.mark.parametrize("action", TECHNICIAN_ONLY)
    def test_plain_user_denied_technician_actions(self, action):
        assert not authorize(USER, action, ticket_owner_id=USER.caller_id)

    @pytest.mark.unit
    @pytest.mark.parametrize("action", [Action.LIST_TICKETS, Action.CREATE_TICKET])
    def test_any_caller_actions(self, action):
        assert authorize(USER, action)
        assert authorize(OTHER_USER, action)

    @pytest.mark.unit
    @pytest.mark.parametrize("action", [Action.READ_TICKET, Action.READ_COMMENTS])
    def test_user_reads_only_own_ticket(self, action):
        assert authorize(USER, action, ticket_owner_id=USER.caller_id)
        assert not authorize(OTHER_USER, action, ticket_owner_id=USER.caller_id)

    @pytest.mark.unit
    def test_user_read_without_owner_is_denied(self):
        assert not authorize(USER, Action.READ_TICKET)

    @pytest.mark.unit
    def test_comment_has_no_ownership_check(self):
        """Known open question: anyone authenticated may comment on any ticket."""
        assert authorize(OTHER_USER, Action.ADD_COMMENT, ticket_owner_id=USER.caller_id)

    @pytest.mark.unit
    def test_require_raises_forbidden(self):
        with pytest.raises(ForbiddenError):
            require(USER, Action.VIEW_STATISTICS)

    @pytest.mark.unit
    def test_require_allows_silently(self):
        assert require(TECHNICIAN, Action.VIEW_STATISTICS) is None
