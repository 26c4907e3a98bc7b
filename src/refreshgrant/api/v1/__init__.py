# API v1 routers.
# Created: 2026-02-20
