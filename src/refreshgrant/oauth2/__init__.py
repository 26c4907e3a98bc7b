# OAuth2 refresh grant core: models, errors, store protocol, grant handler.
# Created: 2026-02-20
