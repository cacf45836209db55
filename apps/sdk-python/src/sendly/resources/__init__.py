"""Typed facades over the Sendly REST resources."""

from .account import AccountResource
from .campaigns import CampaignsResource
from .contacts import ContactListsResource, ContactsResource
from .messages import MessagesResource
from .webhooks import WebhooksResource

__all__ = [
    "AccountResource",
    "CampaignsResource",
    "ContactListsResource",
    "ContactsResource",
    "MessagesResource",
    "WebhooksResource",
]
