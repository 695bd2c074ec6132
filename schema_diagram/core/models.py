"""
Core data models for schema diagrams.

These models describe what gets drawn:
- Columns with their raw engine type and key flags
- Tables with ordered columns and an optional canvas position
- Relationships (foreign keys) between a column in one table and another

Field Naming Convention:
- Python attributes are snake_case (`is_primary_key`, `from_table`)
- camelCase keys (`isPrimaryKey`, `fromTable`) are accepted on input so
  schemas exported by browser front-ends load unchanged
"""

from typing import Optional, Any
from pydantic import BaseModel, ConfigDict, Field, model_validator


def _convert_camel_keys(data: Any, mapping: dict[str, str]) -> Any:
    """Rename camelCase input keys to their snake_case field names."""
    if isinstance(data, dict):
        data = dict(data)
        for camel, snake in mapping.items():
            if camel in data and snake not in data:
                data[snake] = data.pop(camel)
    return data


class Position(BaseModel):
    """A point on the canvas, in canvas units at zoom 1."""
    x: float = 0
    y: float = 0


class Column(BaseModel):
    """A column of a table. Immutable once loaded."""
    model_config = ConfigDict(frozen=True)

    name: str
    type: str = ""  # Raw engine type name, e.g. "INTEGER" or "varchar(255)"
    is_primary_key: bool = False
    is_foreign_key: bool = False

    @model_validator(mode='before')
    @classmethod
    def convert_camel_fields(cls, data: Any) -> Any:
        return _convert_camel_keys(data, {
            "isPrimaryKey": "is_primary_key",
            "isForeignKey": "is_foreign_key",
        })


class Table(BaseModel):
    """
    A table card on the canvas.

    Column order is display order. A table without a position is unplaced
    and is skipped by canvas-size, connector and scene computations.
    """
    name: str
    columns: list[Column] = Field(default_factory=list)
    position: Optional[Position] = None

    def column_index(self, column_name: str) -> Optional[int]:
        """Zero-based index of a column by name, or None if absent."""
        for i, column in enumerate(self.columns):
            if column.name == column_name:
                return i
        return None


class Relationship(BaseModel):
    """
    A foreign key: `from_column` of `from_table` references `to_column` of
    `to_table`.

    References are not checked here; dangling ones are skipped when drawing.
    """
    model_config = ConfigDict(frozen=True)

    from_table: str
    from_column: str
    to_table: str
    to_column: str

    @model_validator(mode='before')
    @classmethod
    def convert_camel_fields(cls, data: Any) -> Any:
        return _convert_camel_keys(data, {
            "fromTable": "from_table",
            "fromColumn": "from_column",
            "toTable": "to_table",
            "toColumn": "to_column",
        })

    @property
    def key(self) -> str:
        """Stable identifier, used for connector ids."""
        return f"{self.from_table}-{self.from_column}-{self.to_table}-{self.to_column}"

    def to_json_dict(self) -> dict:
        """Convert to the camelCase JSON form."""
        return {
            "fromTable": self.from_table,
            "fromColumn": self.from_column,
            "toTable": self.to_table,
            "toColumn": self.to_column,
        }


class Schema(BaseModel):
    """
    The full description being visualized.

    Table names are expected to be unique; this is not enforced here
    (see validation.validate_schema).
    """
    tables: list[Table] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)

    def get_table(self, name: str) -> Optional[Table]:
        """Get a table by name (first match wins)."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def table_names(self) -> list[str]:
        return [t.name for t in self.tables]

    def to_json_dict(self) -> dict:
        """Convert to the camelCase JSON form accepted by from_json_dict."""
        return {
            "tables": [
                {
                    "name": t.name,
                    "columns": [
                        {
                            "name": c.name,
                            "type": c.type,
                            "isPrimaryKey": c.is_primary_key,
                            "isForeignKey": c.is_foreign_key,
                        }
                        for c in t.columns
                    ],
                    **({"position": t.position.model_dump()} if t.position else {}),
                }
                for t in self.tables
            ],
            "relationships": [r.to_json_dict() for r in self.relationships],
        }

    @classmethod
    def from_json_dict(cls, data: dict) -> "Schema":
        """Create a Schema from a JSON dict (snake_case or camelCase keys)."""
        return cls.model_validate({
            "tables": data.get("tables", []),
            "relationships": data.get("relationships", []),
        })
