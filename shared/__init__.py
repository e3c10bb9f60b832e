"""
Shared module for common infrastructure used by the CMS admin API and the CLI.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging

- shared.infrastructure: Database, correlation ids, cache revalidation
  - db.py: SQLAlchemy engine/sessions, safe_commit()
  - correlation.py: X-Request-ID middleware and logging filter
  - revalidation.py: Publishes the paths to revalidate after a mutation

- shared.security: Gates that run before any mutation
  - auth.py: JWT verification, current user
  - permissions.py: resource/action permission checks
  - csrf.py: Double-submit CSRF tokens
  - rate_limit.py: slowapi limiter

- shared.utils: Utilities
  - exceptions.py: Error taxonomy with auto-logging
  - sanitize.py: Input sanitization

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.utils.exceptions import NotFoundError, InvariantViolationError
"""
