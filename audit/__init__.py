"""
Audit module - append-only ledger of every mutating operation.

This module handles:
- AuditLogEntry entity and its per-action details schema
- AuditLedger, which writes the record inside the mutation's transaction
- Audit log listing with time, module, action, operator and product filters
"""
