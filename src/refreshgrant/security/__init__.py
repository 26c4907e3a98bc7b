# Security helpers (audit trail).
# Created: 2026-02-20
