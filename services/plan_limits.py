"""
Plan-limit policy: the single source of truth for listing quotas.

Every code path that decides whether a host may create a listing goes through
evaluate_listing_limits, so the quota can never disagree between the limit
check and listing creation.
"""

from typing import Optional

from models.billing import ListingLimits

UNLIMITED = -1

# Shown to clients instead of the raw sentinel
UNLIMITED_DISPLAY_MAX = 999

PLAN_LIMITS = {
    "básico": 1,
    "basico": 1,
    "premium": 5,
    "diamante": UNLIMITED,
}

NO_SUBSCRIPTION_MESSAGE = (
    "Se requiere una suscripción activa para crear anuncios. ¡Suscríbete para empezar!"
)


def max_listings_for_plan(plan: Optional[str]) -> int:
    """Configured limit for a plan. Unknown plans get 0 (fail closed)."""
    return PLAN_LIMITS.get((plan or "").lower(), 0)


def limit_reached_message(max_allowed: int, plan_name: str) -> str:
    suffix = "" if max_allowed == 1 else "s"
    return (
        f"Has alcanzado el límite de {max_allowed} anuncio{suffix} para tu plan {plan_name}. "
        "¡Mejora tu plan para crear más anuncios!"
    )


def no_subscription_limits() -> ListingLimits:
    return ListingLimits(
        can_create=False,
        current_count=0,
        max_allowed=0,
        plan_name="none",
        is_unlimited=False,
        message=NO_SUBSCRIPTION_MESSAGE,
    )


def evaluate_listing_limits(plan: Optional[str], current_count: int) -> ListingLimits:
    """
    Decide whether a host on `plan` with `current_count` active listings may create another.

    `plan` is the plan of the host's active subscription, or None when there is none.
    """
    if not plan:
        return no_subscription_limits()

    max_allowed = max_listings_for_plan(plan)
    is_unlimited = max_allowed == UNLIMITED
    can_create = is_unlimited or current_count < max_allowed

    return ListingLimits(
        can_create=can_create,
        current_count=current_count,
        max_allowed=UNLIMITED_DISPLAY_MAX if is_unlimited else max_allowed,
        plan_name=plan,
        is_unlimited=is_unlimited,
        message=None if can_create else limit_reached_message(max_allowed, plan),
    )
