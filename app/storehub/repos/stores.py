from sqlalchemy import select

from app.storehub.db.models import Store


class StoreRepository:
    def __init__(self, db):
        self.db = db

    def list_by_tenant(self, tenant_id):
        stmt = select(Store).where(Store.tenant_id == tenant_id).order_by(Store.name.asc())
        return self.db.execute(stmt).scalars().all()

    def get_by_id_in_tenant(self, store_id, tenant_id):
        stmt = select(Store).where(Store.id == store_id, Store.tenant_id == tenant_id)
        return self.db.execute(stmt).scalars().first()

    def create(self, store: Store) -> Store:
        self.db.add(store)
        self.db.commit()
        self.db.refresh(store)
        return store
