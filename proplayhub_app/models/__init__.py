# proplayhub_app/models/__init__.py
# -*- coding: utf-8 -*-
from .user import User
from .package import SubscriptionPackage
from .discount import DiscountCode
from .subscription import Subscription
from .cart import Cart, CartItem
from .notification import Notification
from .message import Message
from .session import AuthSession


__all__ = [
    "User",
    "SubscriptionPackage",
    "DiscountCode",
    "Subscription",
    "Cart",
    "CartItem",
    "Notification",
    "Message",
    "AuthSession",
]
