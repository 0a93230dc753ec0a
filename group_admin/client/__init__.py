from group_admin.client.controller import (
    CapabilityDisabledError,
    GroupListController,
    Popup,
    ViewCapabilities,
    format_date,
)
from group_admin.client.gateway import GatewayClient, GatewayError

__all__ = [
    "CapabilityDisabledError",
    "GatewayClient",
    "GatewayError",
    "GroupListController",
    "Popup",
    "ViewCapabilities",
    "format_date",
]
