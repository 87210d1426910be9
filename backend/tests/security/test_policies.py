"""
Tests for dhhotel/security
Covers: Identity, ReservationAccessPolicy
"""
import pytest
from datetime import date
from decimal import Decimal

from dhhotel.errors import BusinessRuleError, ForbiddenError, NotFoundError
from dhhotel.models.ontology import Reservation, ReservationStatus
from dhhotel.security import Identity, ReservationAccessPolicy, Role
from dhhotel.stores import ClientStore


@pytest.fixture
def policy(db_session):
    return ReservationAccessPolicy(ClientStore(db_session))


def _reservation(client_id, status=ReservationStatus.PENDING):
    return Reservation(
        id=1,
        client_id=client_id,
        room_id=1,
        start_date=date(2030, 3, 10),
        end_date=date(2030, 3, 13),
        total_price=Decimal("360.00"),
        status=status,
    )


class TestIdentity:

    def test_roles(self):
        client = Identity(user_id=10, role=Role.CLIENT)
        admin = Identity(user_id=1, role=Role.ADMIN)
        superadmin = Identity(user_id=2, role=Role.SUPERADMIN)
        assert client.is_client()
        assert not admin.is_client()
        assert not superadmin.is_client()
        assert superadmin.has_role(Role.SUPERADMIN)
        assert not admin.has_role(Role.SUPERADMIN)

    def test_repr(self):
        assert repr(Identity(user_id=3, role=Role.ADMIN)) == "Identity(user_id=3, role=ADMIN)"


class TestReservationAccessPolicy:

    def test_client_scope(self, policy, sample_client, client_identity, admin_identity):
        assert policy.client_scope(client_identity) == sample_client.id
        assert policy.client_scope(admin_identity) is None

    def test_unknown_client(self, policy):
        with pytest.raises(NotFoundError) as exc_info:
            policy.resolve_client(Identity(user_id=999, role=Role.CLIENT))
        assert exc_info.value.code == "client_not_found"

    def test_owner_for_new_reservation(self, policy, sample_client, other_client,
                                       client_identity, admin_identity):
        assert policy.owner_for_new_reservation(client_identity, other_client.id) == sample_client.id
        assert policy.owner_for_new_reservation(admin_identity, other_client.id) == other_client.id
        assert policy.owner_for_new_reservation(admin_identity, None) is None

    def test_modify_own_pending(self, policy, sample_client, client_identity):
        policy.authorize_modify(client_identity, _reservation(sample_client.id))

    def test_modify_foreign(self, policy, other_client, client_identity):
        with pytest.raises(ForbiddenError):
            policy.authorize_modify(client_identity, _reservation(other_client.id))

    @pytest.mark.parametrize("status", [ReservationStatus.CONFIRMED, ReservationStatus.CANCELED])
    def test_client_modify_not_pending(self, policy, sample_client, client_identity, status):
        with pytest.raises(BusinessRuleError) as exc_info:
            policy.authorize_modify(client_identity, _reservation(sample_client.id, status))
        assert exc_info.value.code == "reservation_not_modifiable"

    def test_admin_modify_any_status(self, policy, admin_identity):
        policy.authorize_modify(admin_identity, _reservation(None, ReservationStatus.CONFIRMED))

    def test_cancel(self, policy, sample_client, other_client, client_identity, admin_identity):
        policy.authorize_cancel(None, _reservation(other_client.id))
        policy.authorize_cancel(admin_identity, _reservation(other_client.id))
        policy.authorize_cancel(client_identity, _reservation(sample_client.id))
        with pytest.raises(ForbiddenError):
            policy.authorize_cancel(client_identity, _reservation(other_client.id))

    def test_payment(self, policy, sample_client, other_client, client_identity, admin_identity):
        policy.authorize_payment(admin_identity, _reservation(None))
        policy.authorize_payment(client_identity, _reservation(sample_client.id))
        with pytest.raises(ForbiddenError):
            policy.authorize_payment(client_identity, _reservation(other_client.id))

    def test_payment_correction(self, policy, client_identity, admin_identity, superadmin_identity):
        policy.authorize_payment_correction(None)
        policy.authorize_payment_correction(superadmin_identity)
        for identity in (client_identity, admin_identity):
            with pytest.raises(ForbiddenError):
                policy.authorize_payment_correction(identity)
