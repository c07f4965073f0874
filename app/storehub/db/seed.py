from datetime import datetime, timedelta

from sqlalchemy import select

from app.storehub.core.config import settings
from app.storehub.core.security import get_password_hash
from app.storehub.db.models import Role, Sector, Tenant, TenantSector, User


DEFAULT_ROLES = [
    ("SUPER_ADMIN", "Super Admin", 0, ["*"]),
    ("TENANT_OWNER", "Tenant Owner", 1, ["*"]),
    ("ADMIN", "Admin", 2, ["stores:*", "users:*"]),
    ("MANAGER", "Manager", 3, ["stores:read", "stores:write"]),
    ("STAFF", "Staff", 4, ["stores:read"]),
    ("VIEWER", "Viewer", 5, ["stores:read"]),
]

DEFAULT_SECTORS = [
    ("pos", "Point of Sale"),
    ("warehouse", "Warehouse"),
]


def _get_or_create_roles(db):
    existing = {role.code: role for role in db.execute(select(Role)).scalars().all()}
    for code, name, level, permissions in DEFAULT_ROLES:
        if code in existing:
            continue
        role = Role(code=code, name=name, level=level, permissions=permissions, description=f"System role: {name}")
        db.add(role)
        existing[code] = role
    db.flush()
    return existing


def _get_or_create_sectors(db):
    existing = {sector.code: sector for sector in db.execute(select(Sector)).scalars().all()}
    for code, name in DEFAULT_SECTORS:
        if code in existing:
            continue
        sector = Sector(code=code, name=name)
        db.add(sector)
        existing[code] = sector
    db.flush()
    return existing


def _get_or_create_tenant(db, sectors):
    tenant = (
        db.execute(select(Tenant).where(Tenant.subdomain == settings.DEFAULT_TENANT_SUBDOMAIN)).scalars().first()
    )
    if tenant is None:
        tenant = Tenant(
            name=settings.DEFAULT_TENANT_NAME,
            subdomain=settings.DEFAULT_TENANT_SUBDOMAIN,
            is_active=True,
            status="active",
            subscription_end_date=datetime.utcnow() + timedelta(days=settings.DEFAULT_SUBSCRIPTION_DAYS),
        )
        db.add(tenant)
        db.flush()

    linked = {
        link.sector_id
        for link in db.execute(select(TenantSector).where(TenantSector.tenant_id == tenant.id)).scalars().all()
    }
    for sector in sectors.values():
        if sector.id in linked:
            continue
        db.add(TenantSector(tenant_id=tenant.id, sector_id=sector.id, is_active=True))
    db.flush()
    return tenant


def _get_or_create_superadmin(db, tenant, roles):
    user = db.execute(select(User).where(User.username == settings.SUPERADMIN_USERNAME)).scalars().first()
    if user:
        return user
    user = User(
        tenant_id=tenant.id,
        role_id=roles["SUPER_ADMIN"].id,
        username=settings.SUPERADMIN_USERNAME,
        email=settings.SUPERADMIN_EMAIL,
        hashed_password=get_password_hash(settings.SUPERADMIN_PASSWORD),
        status="active",
        allowed_ips=[],
        extra_permissions=[],
        sector_ids=[],
    )
    db.add(user)
    return user


def run_seed(db):
    roles = _get_or_create_roles(db)
    sectors = _get_or_create_sectors(db)
    tenant = _get_or_create_tenant(db, sectors)
    _get_or_create_superadmin(db, tenant, roles)
    db.commit()
