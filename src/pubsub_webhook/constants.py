"""Wire-level names shared by the webhook layer.

Header names are matched case-insensitively by starlette, so the
casing here only matters for outbound headers.
"""

# =============================================================================
# Content types
# =============================================================================

PLAIN_TEXT_CONTENT_TYPE = "text/plain"
JSON_CONTENT_TYPE = "application/json"
BINARY_CONTENT_TYPE = "application/octet-stream"

# =============================================================================
# CloudEvents headers
# =============================================================================

CE_TYPE_HEADER = "ce-type"
CE_EVENT_NAME_HEADER = "ce-eventName"
CE_HUB_HEADER = "ce-hub"
CE_CONNECTION_ID_HEADER = "ce-connectionId"
CE_USER_ID_HEADER = "ce-userId"
CE_SIGNATURE_HEADER = "ce-signature"
CE_STATE_HEADER = "ce-connectionState"

# System events are published under this type prefix.
SYSTEM_EVENT_TYPE_PREFIX = "azure.webpubsub.sys."

# =============================================================================
# Abuse protection handshake
# =============================================================================

WEBHOOK_REQUEST_ORIGIN_HEADER = "WebHook-Request-Origin"
WEBHOOK_ALLOWED_ORIGIN_HEADER = "WebHook-Allowed-Origin"

# =============================================================================
# Lifecycle event names
# =============================================================================

CONNECT_EVENT = "connect"
CONNECTED_EVENT = "connected"
DISCONNECTED_EVENT = "disconnected"

DEFAULT_WEBHOOK_PATH = "/api/webpubsub"
