"""Infrastructure modules for the dispatch engine.

Centralized infrastructure components:
- configuration: Settings management and the per-dispatch config snapshot
- logging: structlog setup, module loggers and message context
- notifications: Payload models, providers and the notification manager
- operations: Operation results and error classification
- services: Cached settings and notification manager singletons

Subpackages are imported directly (``from infrastructure.operations import
OperationResult``); nothing is re-exported here so that importing one layer
does not load the provider stack.
"""
