"""
Shared infrastructure for the catalog service.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Enums, command patterns, event names

- shared.infrastructure: Database and messaging
  - db.py: SQLAlchemy engine, sessions, safe_commit()
  - correlation.py: Command id propagation for logs
  - events/: Redis pools and event publishing
  - messaging/: Redis Streams command consumer and client

- shared.utils: Utilities
  - exceptions.py: Application exceptions with auto-logging
  - pagination.py: Page/limit pagination and list envelopes
  - health.py: Health check helpers

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db_context, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import ProductCommands, ProductStatus
    from shared.utils.exceptions import NotFoundError, ValidationError
"""
