"""
Schema validation - Check schemas for structural issues.

Nothing here raises: the renderer tolerates every issue reported below, so
validation only explains what will be skipped or look wrong.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Schema


class IssueSeverity(str, Enum):
    """Severity levels for validation issues."""
    ERROR = "error"      # Invalid state, must be fixed
    WARNING = "warning"  # Will be skipped when drawing
    INFO = "info"        # Informational, may be intentional


@dataclass
class ValidationIssue:
    """A single validation issue found in a schema."""
    severity: IssueSeverity
    message: str
    table: str | None = None
    relationship: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.severity.value,
            "message": self.message
        }
        if self.table:
            result["table"] = self.table
        if self.relationship:
            result["relationship"] = self.relationship
        return result


def validate_schema(schema: "Schema") -> list[ValidationIssue]:
    """
    Validate a schema and return a list of issues.

    Checks for:
    - Empty schema - INFO
    - Duplicate table names - ERROR
    - Unplaced tables (not drawn) - WARNING
    - Relationships naming an unknown table or column (not drawn) - WARNING
    """
    issues: list[ValidationIssue] = []

    if not schema.tables:
        issues.append(ValidationIssue(
            severity=IssueSeverity.INFO,
            message="Schema has no tables"
        ))

    counts = Counter(t.name for t in schema.tables)
    for name, count in counts.items():
        if count > 1:
            issues.append(ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=f"Duplicate table name ({count} tables): {name}",
                table=name
            ))

    for table in schema.tables:
        if table.position is None:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message="Table has no position and will not be drawn",
                table=table.name
            ))

    tables_by_name = {}
    for table in schema.tables:
        tables_by_name.setdefault(table.name, table)

    for rel in schema.relationships:
        for table_name, column_name in ((rel.from_table, rel.from_column),
                                        (rel.to_table, rel.to_column)):
            table = tables_by_name.get(table_name)
            if table is None:
                issues.append(ValidationIssue(
                    severity=IssueSeverity.WARNING,
                    message=f"Relationship references unknown table: {table_name}",
                    relationship=rel.key
                ))
            elif table.column_index(column_name) is None:
                issues.append(ValidationIssue(
                    severity=IssueSeverity.WARNING,
                    message=f"Relationship references unknown column: {table_name}.{column_name}",
                    relationship=rel.key
                ))

    return issues


def validation_summary(issues: list[ValidationIssue]) -> dict:
    """Counts by severity; `valid` is True when there are no errors."""
    errors = len([i for i in issues if i.severity == IssueSeverity.ERROR])
    return {
        "total": len(issues),
        "errors": errors,
        "warnings": len([i for i in issues if i.severity == IssueSeverity.WARNING]),
        "info": len([i for i in issues if i.severity == IssueSeverity.INFO]),
        "valid": errors == 0
    }
