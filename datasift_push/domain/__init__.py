"""Push subscription entities."""

from datasift_push.domain.subscription import (
    PushSubscription,
    SUBSCRIPTION_TYPES,
    register_subscription_type,
)
from datasift_push.domain.http import HttpSubscription

__all__ = [
    "PushSubscription",
    "SUBSCRIPTION_TYPES",
    "register_subscription_type",
    "HttpSubscription",
]
