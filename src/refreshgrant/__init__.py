# RefreshGrant: OAuth2 refresh_token grant (RFC 6749 section 6).
# Created: 2026-02-20

__version__ = "0.1.0"
