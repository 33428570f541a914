"""Guardrails for validating generated diagnostic SQL."""
from typing import Optional, Sequence

import structlog

from query_generator.models import ValidationResult

logger = structlog.get_logger()

class QuerySafetyValidator:
    """Static safety scan for generated SQL.

    This is a conservative substring scan, not a parser. A forbidden keyword
    inside a string literal or a comment still fails validation.
    """

    REQUIRED_KEYWORDS = (
        ("SELECT", "Query must contain SELECT statement"),
        ("FROM", "Query must specify FROM table"),
    )
    FORBIDDEN_OPERATIONS = (
        "DROP",
        "DELETE",
        "TRUNCATE",
        "ALTER",
        "CREATE",
        "INSERT",
        "UPDATE",
        "GRANT",
        "REVOKE",
    )

    def __init__(self, forbidden_operations: Optional[Sequence[str]] = None):
        ops = forbidden_operations if forbidden_operations is not None else self.FORBIDDEN_OPERATIONS
        self.forbidden_operations = tuple(op.upper() for op in ops)

    def validate_query(self, sql: Optional[str]) -> ValidationResult:
        """Check SQL for required clauses and forbidden operations.

        Every rule is evaluated; all violations are reported in rule order.
        """
        upper_sql = sql.upper() if isinstance(sql, str) else ""
        errors = []

        for keyword, message in self.REQUIRED_KEYWORDS:
            if keyword not in upper_sql:
                errors.append(message)

        for op in self.forbidden_operations:
            if op in upper_sql:
                errors.append(f"Forbidden operation: {op}")

        if errors:
            logger.debug("SQL failed safety scan", errors=errors)
        return ValidationResult(valid=not errors, errors=errors)


_default_validator = QuerySafetyValidator()


def validate_query(sql: Optional[str]) -> ValidationResult:
    """Validate SQL with the default forbidden-operation set."""
    return _default_validator.validate_query(sql)
