"""
Scope resolution for sales reports

Decides which stores' transactions a report request may see: a single
store for store-level staff, every store of the business for business
administrators.
"""

import logging
from typing import List, Optional, Protocol

from ..exceptions import ScopeError

logger = logging.getLogger(__name__)

SINGLE_STORE_ROLES = frozenset({"store_admin", "cashier"})
BUSINESS_WIDE_ROLES = frozenset({"business_admin", "superadmin"})


class StoreDirectory(Protocol):
    async def list_stores(self, business_id: str) -> List[str]:
        ...


class ScopeResolver:
    """Resolves a caller's role into the list of store ids to load"""

    def __init__(self, directory: StoreDirectory):
        self.directory = directory

    async def resolve(
        self,
        role: Optional[str],
        business_id: Optional[str],
        store_id: Optional[str]
    ) -> List[str]:
        if role in SINGLE_STORE_ROLES:
            if not store_id:
                raise ScopeError(f"Role '{role}' requires a store to be selected", role=role)
            logger.debug(f"Resolved single-store scope for role {role}: {store_id}")
            return [str(store_id)]

        if role in BUSINESS_WIDE_ROLES:
            if not business_id:
                raise ScopeError(f"Role '{role}' requires a business to be selected", role=role)
            store_ids = [str(s) for s in await self.directory.list_stores(str(business_id))]
            logger.debug(
                f"Resolved business-wide scope for role {role}: "
                f"{len(store_ids)} stores in business {business_id}"
            )
            return store_ids

        raise ScopeError(f"Role '{role}' has no access to sales reports", role=role)
