"""
Plan catalog.

Maps a plan identifier to the resource limits a tenant gets. Nothing here is
persisted: limits are recomputed from the plan identifier whenever needed.
"""
import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

UNLIMITED_USERS = -1


class ProvisioningPlan(str, Enum):
    FREE = "free"
    BASIC = "basic"
    PRO = "pro"
    ENTERPRISE = "enterprise"


@dataclass(frozen=True)
class PlanLimits:
    """Resource limits for a plan."""
    max_users: int  # UNLIMITED_USERS for no cap
    storage_limit: str

    @property
    def has_unlimited_users(self) -> bool:
        return self.max_users == UNLIMITED_USERS


PLAN_LIMITS = {
    ProvisioningPlan.FREE: PlanLimits(max_users=5, storage_limit="1GB"),
    ProvisioningPlan.BASIC: PlanLimits(max_users=25, storage_limit="10GB"),
    ProvisioningPlan.PRO: PlanLimits(max_users=100, storage_limit="100GB"),
    ProvisioningPlan.ENTERPRISE: PlanLimits(max_users=UNLIMITED_USERS, storage_limit="1TB"),
}

FALLBACK_PLAN = ProvisioningPlan.FREE


def limits_for(plan: ProvisioningPlan | str) -> PlanLimits:
    """Get the limits for a plan.

    Unknown identifiers get the free tier's limits. The fallback is logged so
    that it shows up if a new plan is added upstream without a mapping here.
    """
    try:
        return PLAN_LIMITS[ProvisioningPlan(plan)]
    except ValueError:
        logger.warning(f"Unknown plan {plan!r}, falling back to {FALLBACK_PLAN.value} limits")
        return PLAN_LIMITS[FALLBACK_PLAN]
