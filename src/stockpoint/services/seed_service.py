"""Seed data - global permission catalog and per-tenant system roles."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.stockpoint.core.logging import get_logger
from src.stockpoint.core.security import hash_password
from src.stockpoint.models import Permission, Role, Tenant, User
from src.stockpoint.repositories import (
    PermissionRepository,
    RoleRepository,
    TenantRepository,
    UserRepository,
)

logger = get_logger(__name__)

ADMIN_ROLE_NAME = "Admin"

CORE_PERMISSIONS: dict[str, str] = {
    # User & role management
    "user:create": "Create new users within the tenant",
    "user:read:own": "View own user profile details",
    "user:read:any": "View profile details of any user within the tenant",
    "user:update:own": "Update own user profile",
    "user:update:any": "Update profile details of any user within the tenant",
    "user:update:activity": "Activate or deactivate any user account",
    "user:assign:roles": "Assign or unassign roles to users",
    "role:create": "Create new custom roles",
    "role:read": "View available roles and their permissions",
    "role:update": "Modify custom roles and their assigned permissions",
    "role:delete": "Delete custom roles",
    # Catalog
    "category:create": "Create product categories",
    "category:read": "View product categories",
    "category:update": "Update product categories",
    "category:delete": "Delete product categories",
    "product:create": "Create new products",
    "product:read": "View product details and list products",
    "product:update": "Update product information",
    "product:delete": "Delete products",
    # Locations
    "location:create": "Create new locations",
    "location:read": "View location details",
    "location:update": "Update location details",
    "location:delete": "Delete locations",
    # Inventory
    "inventory:read": "View current stock",
    "inventory:adjust": "Create inventory adjustments",
    "inventory:transfer:create": "Create inventory transfer requests",
    "inventory:transfer:receive": "Mark a transfer as received",
    "inventory:count:start": "Initiate a stock count process",
    "inventory:count:approve": "Approve and post count variances",
    # Purchasing and customers
    "supplier:read": "View supplier details",
    "po:create": "Create new purchase orders",
    "po:receive": "Receive items against a purchase order",
    "customer:create": "Create new customers",
    "customer:read": "View customer details and list customers",
    # Sales and POS
    "order:create": "Create new orders (non-POS)",
    "order:read": "View any order within the tenant",
    "order:cancel": "Cancel an order",
    "pos:session:start": "Start a new POS session",
    "pos:session:end": "End own POS session",
    "pos:checkout": "Perform a sales transaction checkout",
    "pos:return": "Process returns and exchanges at the POS",
    # Reporting and tenant settings
    "report:view:sales": "View sales reports",
    "report:view:inventory": "View inventory reports",
    "tenant:config:read": "View tenant-specific configurations",
    "tenant:config:update": "Modify tenant-specific configurations",
}


class SeedService:
    """Idempotent seeding of permissions, system roles and a first admin."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.permission_repo = PermissionRepository(session)
        self.role_repo = RoleRepository(session)
        self.tenant_repo = TenantRepository(session)
        self.user_repo = UserRepository(session)

    async def seed_permissions(self) -> list[Permission]:
        """Insert missing catalog entries and refresh descriptions."""
        existing = {p.permission_key: p for p in await self.permission_repo.list_all()}
        for key, description in CORE_PERMISSIONS.items():
            permission = existing.get(key)
            if permission is None:
                permission = Permission(permission_key=key, description=description)
                existing[key] = permission
            else:
                permission.description = description
            self.permission_repo.add(permission)
        await self.session.flush()
        return list(existing.values())

    async def ensure_admin_role(self, tenant_id: UUID, permissions: list[Permission]) -> Role:
        """System Admin role holding every permission and all locations."""
        role = await self.role_repo.get_by_name(tenant_id, ADMIN_ROLE_NAME)
        if role is None:
            role = Role(tenant_id=tenant_id, name=ADMIN_ROLE_NAME)
        role.description = "Administrator with full access"
        role.is_system_role = True
        role.grants_all_locations = True
        role.permissions = list(permissions)
        self.role_repo.add(role)
        await self.session.flush()
        return role

    async def seed_tenant(
        self,
        tenant_name: str,
        admin_email: str,
        admin_password: str,
        admin_first_name: str = "Admin",
        admin_last_name: str = "User",
    ) -> Tenant:
        """Seed catalog, a tenant, its Admin role and an admin user. Commits.

        Re-running with the same tenant name reuses the tenant and leaves an
        existing admin untouched.
        """
        try:
            permissions = await self.seed_permissions()

            tenant = await self.tenant_repo.get_by_name(tenant_name)
            if tenant is None:
                tenant = Tenant(name=tenant_name)
                self.tenant_repo.add(tenant)
                await self.session.flush()

            admin_role = await self.ensure_admin_role(tenant.id, permissions)

            if not await self.user_repo.get_by_email(admin_email, tenant.id):
                user = User(
                    tenant_id=tenant.id,
                    email=admin_email.lower(),
                    hashed_password=hash_password(admin_password),
                    first_name=admin_first_name,
                    last_name=admin_last_name,
                    roles=[admin_role],
                )
                self.user_repo.add(user)

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Seed completed",
            tenant_id=str(tenant.id),
            permissions=len(permissions),
        )
        return tenant
