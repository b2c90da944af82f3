"""Gmail API core: token manager, request pipeline and MIME encoder.

Transport-backed classes are loaded lazily. Use explicit imports:
    from gmail_mcp.gmail.client import GmailClient
    from gmail_mcp.gmail.auth import CredentialManager
    from gmail_mcp.gmail.pipeline import RequestPipeline
    etc.
"""

# Light imports only (no external deps)
from gmail_mcp.gmail.message import OutgoingMessage, build_raw_message


def __getattr__(name):
    """Lazy imports for classes that pull in httpx."""
    if name == "GmailClient":
        from gmail_mcp.gmail.client import GmailClient
        return GmailClient
    if name in ("CredentialManager", "CachedToken"):
        from gmail_mcp.gmail import auth
        return getattr(auth, name)
    if name == "RequestPipeline":
        from gmail_mcp.gmail.pipeline import RequestPipeline
        return RequestPipeline
    if name in ("HttpxTransport", "Transport", "TransportResponse"):
        from gmail_mcp.gmail import transport
        return getattr(transport, name)
    raise AttributeError(f"module 'gmail_mcp.gmail' has no attribute {name!r}")


__all__ = [
    "GmailClient",
    "CredentialManager",
    "CachedToken",
    "RequestPipeline",
    "HttpxTransport",
    "Transport",
    "TransportResponse",
    "OutgoingMessage",
    "build_raw_message",
]
