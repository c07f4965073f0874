from __future__ import annotations

import uuid
from datetime import datetime, timedelta

from sqlalchemy import select

from app.storehub.core.security import get_password_hash
from app.storehub.db.models import Role, Sector, Tenant, TenantSector, User
from app.storehub.db.seed import run_seed
from app.storehub.services.security_events import SecurityEventLog

PASSWORD = "Pass1234!"
_PASSWORD_HASH = None


def _password_hash() -> str:
    global _PASSWORD_HASH
    if _PASSWORD_HASH is None:
        _PASSWORD_HASH = get_password_hash(PASSWORD)
    return _PASSWORD_HASH


class RecordingEvents(SecurityEventLog):
    def __init__(self):
        super().__init__()
        self.events: list[tuple[str, str, dict]] = []

    def record(self, event, details=None, severity="medium"):
        self.events.append((event, severity, dict(details or {})))
        super().record(event, details, severity)

    def names(self) -> list[str]:
        return [name for name, _severity, _details in self.events]


def record_events(client) -> RecordingEvents:
    events = RecordingEvents()
    client.app.state.security_events = events
    return events


def seed_defaults(db_session):
    run_seed(db_session)


def get_role(db_session, code: str) -> Role:
    return db_session.execute(select(Role).where(Role.code == code)).scalars().one()


def create_tenant(
    db_session,
    *,
    subdomain: str,
    sectors: tuple[str, ...] = ("pos", "warehouse"),
    is_active: bool = True,
    status: str = "active",
    subscription_end_date: datetime | None = None,
    domain: str | None = None,
) -> Tenant:
    seed_defaults(db_session)
    tenant = Tenant(
        id=uuid.uuid4(),
        name=f"Tenant {subdomain}",
        subdomain=subdomain,
        domain=domain,
        is_active=is_active,
        status=status,
        subscription_end_date=subscription_end_date or datetime.utcnow() + timedelta(days=30),
    )
    db_session.add(tenant)
    db_session.flush()
    for code in sectors:
        sector = db_session.execute(select(Sector).where(Sector.code == code)).scalars().one()
        db_session.add(TenantSector(tenant_id=tenant.id, sector_id=sector.id, is_active=True))
    db_session.commit()
    return tenant


def create_user(
    db_session,
    tenant: Tenant,
    *,
    username: str,
    role: str = "STAFF",
    status: str = "active",
    sector_ids: list[str] | None = None,
    extra_permissions: list[str] | None = None,
    is_ip_restricted: bool = False,
    allowed_ips: list[str] | None = None,
    is_2fa_enabled: bool = False,
    is_2fa_verified: bool = False,
) -> User:
    user = User(
        id=uuid.uuid4(),
        tenant_id=tenant.id,
        role_id=get_role(db_session, role).id,
        username=username,
        email=f"{username}@example.com",
        hashed_password=_password_hash(),
        status=status,
        is_ip_restricted=is_ip_restricted,
        allowed_ips=allowed_ips or [],
        is_2fa_enabled=is_2fa_enabled,
        is_2fa_verified=is_2fa_verified,
        extra_permissions=extra_permissions or [],
        sector_ids=sector_ids or [],
    )
    db_session.add(user)
    db_session.commit()
    return user


def login(client, username: str, tenant: str | None = None, password: str = PASSWORD) -> str:
    headers = {"X-Tenant-ID": tenant} if tenant else {}
    response = client.post(
        "/api/v1/auth/login",
        json={"username_or_email": username, "password": password},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def auth_headers(token: str, tenant: str | None = None) -> dict:
    headers = {"Authorization": f"Bearer {token}"}
    if tenant:
        headers["X-Tenant-ID"] = tenant
    return headers
