from schema_diagram.core.models import Column, Position, Relationship, Schema, Table
from schema_diagram.core.validation import IssueSeverity, validate_schema, validation_summary


def test_empty_schema_is_info_only():
    issues = validate_schema(Schema())
    assert [i.severity for i in issues] == [IssueSeverity.INFO]
    assert validation_summary(issues)["valid"] is True


def test_clean_schema_has_no_issues(two_tables):
    assert validate_schema(two_tables) == []


def test_reports_duplicates_unplaced_and_dangling():
    schema = Schema(
        tables=[
            Table(name="t", columns=[Column(name="id")], position=Position()),
            Table(name="t", columns=[Column(name="id")], position=Position(x=320)),
            Table(name="loose", columns=[Column(name="id")]),
        ],
        relationships=[
            Relationship(from_table="t", from_column="id", to_table="gone", to_column="id"),
            Relationship(from_table="t", from_column="missing", to_table="loose", to_column="id"),
        ],
    )
    issues = validate_schema(schema)
    by_severity = {}
    for issue in issues:
        by_severity.setdefault(issue.severity, []).append(issue)

    assert len(by_severity[IssueSeverity.ERROR]) == 1
    assert by_severity[IssueSeverity.ERROR][0].table == "t"
    messages = [i.message for i in by_severity[IssueSeverity.WARNING]]
    assert "Table has no position and will not be drawn" in messages
    assert "Relationship references unknown table: gone" in messages
    assert "Relationship references unknown column: t.missing" in messages

    summary = validation_summary(issues)
    assert summary == {"total": 4, "errors": 1, "warnings": 3, "info": 0, "valid": False}


def test_issue_to_dict():
    schema = Schema(
        tables=[Table(name="a", columns=[], position=Position())],
        relationships=[Relationship(from_table="a", from_column="x", to_table="a", to_column="x")],
    )
    data = [i.to_dict() for i in validate_schema(schema)]
    assert data[0] == {
        "type": "warning",
        "message": "Relationship references unknown column: a.x",
        "relationship": "a-x-a-x",
    }
