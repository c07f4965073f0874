import uuid
from datetime import datetime, timedelta
from types import SimpleNamespace

from sqlalchemy.exc import OperationalError

from app.storehub.core.context import RequestContext
from app.storehub.core.error_catalog import ErrorCatalog
from app.storehub.services.pipeline import Continue, Reject
from app.storehub.services.tenancy import TenantResolver, is_tenant_active

NOW = datetime(2026, 6, 1, 12, 0, 0)


class _Repo:
    def __init__(self, tenants=(), error=None):
        self.tenants = {tenant.subdomain: tenant for tenant in tenants}
        self.error = error
        self.lookups = []

    def get_by_identifier(self, identifier):
        self.lookups.append(identifier)
        if self.error is not None:
            raise self.error
        return self.tenants.get(identifier)


def _tenant(subdomain="acme", *, is_active=True, status="active", days=30, sectors=("pos", "warehouse")):
    links = [
        SimpleNamespace(is_active=True, sector_id=uuid.uuid4(), sector=SimpleNamespace(code=code))
        for code in sectors
    ]
    return SimpleNamespace(
        id=uuid.uuid4(),
        subdomain=subdomain,
        is_active=is_active,
        status=status,
        subscription_end_date=NOW + timedelta(days=days) if days is not None else None,
        tenant_sectors=links,
    )


def _context() -> RequestContext:
    return RequestContext(trace_id="trace", method="GET", path="/api/v1/pos/summary", client_ip="1.1.1.1")


def _run(repo, tenant_identifier, sector_identifier=None, allow_anonymous=False):
    resolver = TenantResolver(repo, clock=lambda: NOW)
    return resolver.stage(tenant_identifier, sector_identifier, allow_anonymous=allow_anonymous)(_context())


def test_active_tenant_with_granted_sector_resolves():
    tenant = _tenant()

    result = _run(_Repo([tenant]), "acme", "pos")

    assert isinstance(result, Continue)
    assert result.context.tenant is tenant
    assert result.context.tenant_id == str(tenant.id)
    assert result.context.sector_id == "pos"


def test_sector_named_by_id_resolves_to_its_code():
    tenant = _tenant()
    pos_id = str(tenant.tenant_sectors[0].sector_id)

    by_id = _run(_Repo([tenant]), "acme", pos_id)
    by_upper_id = _run(_Repo([tenant]), "acme", pos_id.upper())
    by_upper_code = _run(_Repo([tenant]), "acme", "POS")

    assert by_id.context.sector_id == "pos"
    assert by_upper_id.context.sector_id == "pos"
    assert by_upper_code.context.sector_id == "pos"


def test_unknown_sector_id_is_denied():
    result = _run(_Repo([_tenant()]), "acme", str(uuid.uuid4()))

    assert result.error == ErrorCatalog.SECTOR_ACCESS_DENIED


def test_sector_id_empty_when_not_requested():
    result = _run(_Repo([_tenant()]), "acme")

    assert result.context.sector_id == ""


def test_missing_identifier():
    result = _run(_Repo(), None)

    assert result.error == ErrorCatalog.TENANT_IDENTIFIER_MISSING
    assert result.event is None


def test_missing_identifier_allowed_for_public_paths():
    context = _context()

    result = TenantResolver(_Repo(), clock=lambda: NOW).stage(None, None, allow_anonymous=True)(context)

    assert result == Continue(context)


def test_unknown_tenant():
    result = _run(_Repo(), "ghost")

    assert result.error == ErrorCatalog.TENANT_NOT_FOUND
    assert result.event.name == "tenant_resolution_failed"
    assert result.event.severity == "high"
    assert result.event.details["identifier"] == "ghost"


def test_expired_subscription_reported_even_when_flag_is_active():
    result = _run(_Repo([_tenant(days=-1)]), "acme")

    assert result.error == ErrorCatalog.SUBSCRIPTION_EXPIRED
    assert result.event.name == "expired_subscription_access_attempt"


def test_expired_subscription_wins_over_inactive_flag():
    result = _run(_Repo([_tenant(days=-1, is_active=False)]), "acme")

    assert result.error == ErrorCatalog.SUBSCRIPTION_EXPIRED


def test_missing_subscription_end_counts_as_expired():
    result = _run(_Repo([_tenant(days=None)]), "acme")

    assert result.error == ErrorCatalog.SUBSCRIPTION_EXPIRED


def test_inactive_tenant():
    for tenant in (_tenant(is_active=False), _tenant(status="suspended"), _tenant(sectors=())):
        result = _run(_Repo([tenant]), "acme")
        assert result.error == ErrorCatalog.TENANT_INACTIVE
        assert result.event.name == "inactive_tenant_access_attempt"
        assert result.event.severity == "medium"


def test_sector_not_granted():
    result = _run(_Repo([_tenant(sectors=("pos",))]), "acme", "warehouse")

    assert result.error == ErrorCatalog.SECTOR_ACCESS_DENIED
    assert result.event.name == "unauthorized_sector_access_attempt"
    assert result.event.severity == "high"


def test_sector_matched_by_id():
    tenant = _tenant(sectors=("pos",))
    sector_id = str(tenant.tenant_sectors[0].sector_id)

    result = _run(_Repo([tenant]), "acme", sector_id)

    assert isinstance(result, Continue)


def test_storage_error_is_reported_as_resolution_error():
    result = _run(_Repo(error=OperationalError("SELECT", {}, Exception("down"))), "acme")

    assert isinstance(result, Reject)
    assert result.error == ErrorCatalog.TENANT_RESOLUTION_ERROR
    assert result.error.status_code == 500


def test_resolution_is_idempotent():
    repo = _Repo([_tenant()])

    first = _run(repo, "acme", "pos")
    second = _run(repo, "acme", "pos")

    assert first == second


def test_activation_predicate():
    assert is_tenant_active(_tenant(), NOW)
    assert not is_tenant_active(_tenant(days=-1), NOW)
