"""Access Control Gate — verifies guard outcomes per identity."""

import pytest

from travelcrm.core.access_control import require_admin, require_authenticated
from travelcrm.core.domain_types import AdminId, Role, SessionIdentity
from travelcrm.core.errors import ForbiddenError, UnauthorizedError

ADMIN = SessionIdentity(id=AdminId(1), username="admin", role=Role.ADMIN)
USER = SessionIdentity(id=AdminId(2), username="agent", role=Role.USER)


def test_anonymous_is_unauthorized():
    with pytest.raises(UnauthorizedError) as exc:
        require_authenticated(None)
    assert exc.value.http_status == 401


def test_any_identity_passes_authenticated_gate():
    assert require_authenticated(USER) is USER
    assert require_authenticated(ADMIN) is ADMIN


def test_anonymous_on_admin_route_is_unauthorized_not_forbidden():
    with pytest.raises(UnauthorizedError):
        require_admin(None)


def test_user_role_on_admin_route_is_forbidden():
    with pytest.raises(ForbiddenError) as exc:
        require_admin(USER)
    assert exc.value.http_status == 403
    assert exc.value.to_response() == {"message": "Forbidden"}


def test_admin_passes_admin_gate():
    assert require_admin(ADMIN) is ADMIN
