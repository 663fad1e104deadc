"""Tests for rule table and fact loading.

This module covers the FileReader (YAML/JSON parsing and error reporting),
rule-file validation through the pydantic models, fact loading from files
and streams, and exporting tables back to text.
"""

import io
import json

import pytest

from jobflow.defaults import default_rule_table
from jobflow.loader import (
    FileReader,
    dump_rule_table,
    load_facts,
    load_rule_table,
    parse_rule_table,
)
from jobflow.models import ConfigValidationError, FileFormat, LoadError


class TestFileReader:
    def test_detect_format(self, tmp_path):
        assert FileReader.detect_format(tmp_path / "a.json") == FileFormat.JSON
        assert FileReader.detect_format(tmp_path / "a.yml") == FileFormat.YAML
        assert FileReader.detect_format(tmp_path / "a.txt") == FileFormat.YAML

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError, match="File not found"):
            FileReader.read(tmp_path / "missing.yaml")

    def test_directory_is_not_a_file(self, tmp_path):
        with pytest.raises(LoadError, match="Not a file"):
            FileReader.read(tmp_path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(LoadError, match="Invalid JSON"):
            FileReader.read(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("stages: [unclosed\n", encoding="utf-8")

        with pytest.raises(LoadError, match="Invalid YAML"):
            FileReader.read(path)

    def test_empty_stream(self):
        with pytest.raises(LoadError, match="No data provided"):
            FileReader.read_stream(io.StringIO("  \n"))

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_bytes(b"stages:\n  - stage: \xff\n")

        with pytest.raises(LoadError, match="Cannot decode .* as UTF-8"):
            FileReader.read(path)

    def test_undecodable_stream(self):
        stream = io.TextIOWrapper(io.BytesIO(b"hasInvoice: \xff\n"), encoding="utf-8")

        with pytest.raises(LoadError, match="Cannot decode <stdin> as UTF-8"):
            FileReader.read_stream(stream)


class TestLoadRuleTable:
    def test_load_yaml_file(self, sample_rules_file):
        table = load_rule_table(sample_rules_file)

        assert table.name == "small"
        assert table.stages == ["open", "review", "done", "cancelled"]
        assert table.is_unrestricted("cancelled")
        assert table.rule_for("done").prerequisites[0].value == "pass"

    def test_load_json_file_without_wrapper(self, tmp_path, small_table_definition):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps(small_table_definition), encoding="utf-8")

        assert load_rule_table(path).stages == ["open", "review", "done", "cancelled"]

    def test_camel_case_aliases(self):
        table = parse_rule_table(
            {
                "stages": [
                    {
                        "stage": "surveyed",
                        "canSkip": True,
                        "prerequisites": [
                            {
                                "field": "surveyCount",
                                "check": "has_related",
                                "relatedTable": "job_surveys",
                                "relatedField": "job_id",
                                "message": "Survey required",
                            }
                        ],
                    }
                ]
            }
        )

        rule = table.rule_for("surveyed")
        assert rule.can_skip is True
        assert rule.prerequisites[0].related_table == "job_surveys"

    def test_identifiers_trimmed_but_text_kept_verbatim(self):
        table = parse_rule_table(
            {
                "stages": [
                    {
                        "stage": " review ",
                        "prerequisites": [
                            {
                                "field": " result ",
                                "check": "equals",
                                "value": " pass ",
                                "message": "  Review must pass ",
                            }
                        ],
                    }
                ]
            }
        )

        prerequisite = table.require("review").prerequisites[0]
        assert prerequisite.field == "result"
        assert prerequisite.value == " pass "
        assert prerequisite.message == "  Review must pass "

    def test_structural_errors_collected(self):
        data = {
            "stages": [
                {"stage": "a", "prerequisites": [{"field": "x", "check": "equals", "message": "m"}]},
                {"stage": "b", "prerequisites": [{"field": "x", "check": "between", "message": "m"}]},
                {"stage": "c", "colour": "red"},
            ]
        }

        with pytest.raises(ConfigValidationError) as exc_info:
            parse_rule_table(data, source="rules.yaml")

        error = exc_info.value
        assert error.source == "rules.yaml"
        assert error.error_count == 3
        assert any("value" in e for e in error.errors)
        assert any("colour" in e for e in error.errors)

    def test_semantic_errors_become_validation_errors(self):
        data = {
            "unrestricted_stages": ["lost"],
            "stages": [{"stage": "a"}, {"stage": "a"}],
        }

        with pytest.raises(ConfigValidationError) as exc_info:
            parse_rule_table(data)

        assert exc_info.value.errors == [
            "Duplicate stage 'a' in rule table",
            "Unrestricted stage 'lost' is not declared in the rule table",
        ]

    def test_empty_stage_list(self):
        with pytest.raises(ConfigValidationError):
            parse_rule_table({"stages": []})

    def test_non_mapping_document(self):
        with pytest.raises(ConfigValidationError, match="must be a mapping"):
            parse_rule_table(["a", "b"])

    def test_validation_error_is_load_error(self):
        with pytest.raises(LoadError):
            parse_rule_table({"stages": "nope"})


class TestLoadFacts:
    def test_from_json_file(self, facts_file):
        facts = load_facts(facts_file)
        assert facts["quotedValue"] == 1200.0

    def test_from_yaml_stream(self):
        facts = load_facts(stream=io.StringIO("hasInvoice: true\nquoteResponse: accepted\n"))
        assert facts == {"hasInvoice": True, "quoteResponse": "accepted"}

    def test_from_json_stream(self):
        facts = load_facts(stream=io.StringIO('{"isPaidInFull": false}'))
        assert facts == {"isPaidInFull": False}

    def test_must_be_mapping(self):
        with pytest.raises(LoadError, match="must be a mapping"):
            load_facts(stream=io.StringIO("- a\n- b\n"))

    @pytest.mark.parametrize("text", ["isPaidInFull: true\n1: x\n", "true: y\n"])
    def test_fact_names_must_be_strings(self, text):
        with pytest.raises(LoadError, match="Fact names in <stdin> must be strings"):
            load_facts(stream=io.StringIO(text))


class TestDumpRuleTable:
    @pytest.mark.parametrize("file_format", [FileFormat.YAML, FileFormat.JSON])
    def test_export_reloads_to_same_table(self, tmp_path, file_format):
        table = default_rule_table()
        path = tmp_path / f"rules.{file_format.value}"
        path.write_text(dump_rule_table(table, file_format), encoding="utf-8")

        reloaded = load_rule_table(path)

        assert reloaded.to_dict() == table.to_dict()

    def test_yaml_export_is_wrapped(self):
        text = dump_rule_table(default_rule_table())
        assert text.startswith("rule_table:")
