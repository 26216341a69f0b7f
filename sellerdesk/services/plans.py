# sellerdesk/services/plans.py
# Static plan catalog served by /api/users/plans. -1 in limits means unlimited.
from sellerdesk.schemas.auth import Tier
from sellerdesk.schemas.users import Plan

UNLIMITED = -1

PLANS: list[Plan] = [
    Plan(
        id=Tier.FREE,
        name="Free",
        price=0,
        features=[
            "Up to 5 market researches per month",
            "Basic calculators",
            "Email support",
            "Basic dashboard",
        ],
        limits={"market_research": 5, "store_connections": 0, "api_calls": 100},
    ),
    Plan(
        id=Tier.PREMIUM,
        name="Premium",
        price=49.90,
        features=[
            "Unlimited market researches",
            "Up to 3 store connections",
            "Advanced calculators",
            "Detailed reports",
            "Priority support",
            "API access",
        ],
        limits={
            "market_research": UNLIMITED,
            "store_connections": 3,
            "api_calls": 10_000,
        },
    ),
    Plan(
        id=Tier.ENTERPRISE,
        name="Enterprise",
        price=149.90,
        features=[
            "Everything in Premium",
            "Unlimited store connections",
            "ERP integration",
            "Custom reports",
            "24/7 support",
            "Unlimited API",
            "Specialist consulting",
        ],
        limits={
            "market_research": UNLIMITED,
            "store_connections": UNLIMITED,
            "api_calls": UNLIMITED,
        },
    ),
]


def get_plan(tier: Tier) -> Plan:
    return next(p for p in PLANS if p.id == tier)
