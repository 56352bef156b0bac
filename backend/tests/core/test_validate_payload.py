"""Schema Validator: tests for parse_completion and validate_payload.

Invariants:
    - Non-JSON, empty, and non-object replies → Err(ParseError)
    - Missing/mistyped fields → Err(SchemaError) naming the field by dotted path
    - Valid replies → Ok(payload) with declared fields only
    - Timestamps become aware UTC datetimes
"""

import json
from datetime import datetime, timezone

import pytest

from insight.core.errors import ParseError, SchemaError
from insight.core.result import Err, Ok
from insight.core.validate_payload import parse_completion, validate_payload
from insight.services.define_market_domains import MARKET_ANALYSIS
from insight.services.define_planning_domains import TIMELINE_PLANNING
from insight.services.define_product_domains import FEATURE_ANALYSIS


def _feature_reply(**analysis_overrides) -> dict:
    analysis = {
        "impact": 87.6,
        "feasibility": 140,
        "priority": "high",
        "timeEstimate": "2-3 weeks",
        "dependencies": ["Auth service"],
        "risks": ["Scope creep"],
    }
    analysis.update(analysis_overrides)
    return {"analysis": analysis, "recommendations": ["Ship behind a flag"]}


def _market_reply() -> dict:
    return {
        "analysis": {
            "marketSize": 1200,
            "growthRate": 12.5,
            "segments": [
                {
                    "name": "SMB", "size": 400, "growth": 9,
                    "description": "Small teams",
                    "opportunities": ["Self-serve"], "challenges": ["Churn"],
                },
            ],
            "trends": ["AI copilots"],
            "barriers": ["Incumbents"],
            "risks": ["Pricing pressure"],
        },
        "competitors": [
            {
                "name": "Acme", "strengths": ["Brand"], "weaknesses": ["Slow"],
                "marketShare": 35, "threat": "high",
            },
        ],
        "recommendations": ["Focus on SMB"],
    }


# -- parse_completion ----------------------------------------------------------

@pytest.mark.parametrize("raw", ["not json", "", "   ", "{\"analysis\": "])
def test_parse_rejects_non_json(raw):
    result = parse_completion(raw)
    assert isinstance(result, Err)
    assert isinstance(result.error, ParseError)
    assert result.error.message.startswith("Failed to parse AI response")


def test_parse_rejects_non_object():
    result = parse_completion("[1, 2, 3]")
    assert isinstance(result, Err)
    assert "expected a JSON object" in result.error.message


def test_parse_strips_json_fence():
    raw = "```json\n{\"a\": 1}\n```"
    assert parse_completion(raw) == Ok({"a": 1})


# -- validate_payload ----------------------------------------------------------

def test_valid_feature_reply_ok():
    result = validate_payload(json.dumps(_feature_reply()), FEATURE_ANALYSIS)
    assert isinstance(result, Ok)
    assert result.value["analysis"]["impact"] == 87.6
    assert result.value["recommendations"] == ["Ship behind a flag"]


def test_not_json_is_parse_error():
    result = validate_payload("not json", FEATURE_ANALYSIS)
    assert isinstance(result, Err)
    assert isinstance(result.error, ParseError)


def test_missing_analysis_named():
    result = validate_payload(json.dumps({"recommendations": []}), FEATURE_ANALYSIS)
    assert isinstance(result.error, SchemaError)
    assert result.error.field == "analysis"


def test_missing_recommendations_named():
    reply = _feature_reply()
    del reply["recommendations"]
    result = validate_payload(json.dumps(reply), FEATURE_ANALYSIS)
    assert result.error.field == "recommendations"


def test_string_score_rejected_naming_field():
    result = validate_payload(json.dumps(_feature_reply(impact="high")), FEATURE_ANALYSIS)
    assert isinstance(result.error, SchemaError)
    assert result.error.field == "analysis.impact"
    assert "analysis.impact" in result.error.message


def test_bool_is_not_a_number():
    result = validate_payload(json.dumps(_feature_reply(impact=True)), FEATURE_ANALYSIS)
    assert result.error.field == "analysis.impact"


def test_nan_rejected():
    raw = json.dumps(_feature_reply()).replace("87.6", "NaN")
    result = validate_payload(raw, FEATURE_ANALYSIS)
    assert result.error.field == "analysis.impact"


def _with_impact_literal(literal: str) -> str:
    return json.dumps(_feature_reply()).replace("87.6", literal)


def test_integer_too_large_for_float_named():
    result = validate_payload(_with_impact_literal("1" * 400), FEATURE_ANALYSIS)
    assert isinstance(result.error, SchemaError)
    assert result.error.field == "analysis.impact"
    assert result.error.reason == "must be a finite number"


def test_integer_over_digit_limit_is_parse_error():
    result = validate_payload(_with_impact_literal("1" * 5000), FEATURE_ANALYSIS)
    assert isinstance(result, Err)
    assert isinstance(result.error, ParseError)


def test_enum_outside_choices_rejected():
    result = validate_payload(json.dumps(_feature_reply(priority="urgent")), FEATURE_ANALYSIS)
    assert result.error.field == "analysis.priority"
    assert "high, medium, low" in result.error.reason


def test_list_item_type_checked():
    result = validate_payload(json.dumps(_feature_reply(risks=["ok", 3])), FEATURE_ANALYSIS)
    assert result.error.field == "analysis.risks[1]"


def test_nested_object_field_path():
    reply = _market_reply()
    reply["analysis"]["segments"][0]["growth"] = "fast"
    result = validate_payload(json.dumps(reply), MARKET_ANALYSIS)
    assert result.error.field == "analysis.segments[0].growth"


def test_extra_field_validated():
    reply = _market_reply()
    reply["competitors"][0]["threat"] = "extreme"
    result = validate_payload(json.dumps(reply), MARKET_ANALYSIS)
    assert result.error.field == "competitors[0].threat"


def test_market_reply_keeps_competitors():
    result = validate_payload(json.dumps(_market_reply()), MARKET_ANALYSIS)
    assert isinstance(result, Ok)
    assert result.value["competitors"][0]["name"] == "Acme"


def test_undeclared_keys_dropped():
    reply = _feature_reply(extra="ignored")
    reply["other"] = 1
    result = validate_payload(json.dumps(reply), FEATURE_ANALYSIS)
    assert "extra" not in result.value["analysis"]
    assert "other" not in result.value


def test_empty_arrays_accepted():
    result = validate_payload(json.dumps(_feature_reply(risks=[])), FEATURE_ANALYSIS)
    assert isinstance(result, Ok)


def test_timestamps_become_aware_datetimes():
    reply = {
        "analysis": {
            "totalDuration": 90,
            "criticalPath": ["Launch"],
            "riskLevel": "medium",
            "phases": [
                {
                    "name": "Build", "description": "Core work",
                    "startDate": "2025-01-01", "endDate": "2025-02-01T00:00:00Z",
                    "milestones": [],
                    "risks": [],
                },
            ],
            "assumptions": [],
            "constraints": [],
        },
        "recommendations": [],
    }
    result = validate_payload(json.dumps(reply), TIMELINE_PLANNING)
    phase = result.value["analysis"]["phases"][0]
    assert phase["startDate"] == datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert phase["endDate"] == datetime(2025, 2, 1, tzinfo=timezone.utc)


def test_bad_timestamp_named():
    reply = {
        "analysis": {
            "totalDuration": 90, "criticalPath": [], "riskLevel": "low",
            "phases": [{
                "name": "Build", "description": "", "startDate": "soon",
                "endDate": "2025-02-01", "milestones": [], "risks": [],
            }],
            "assumptions": [], "constraints": [],
        },
        "recommendations": [],
    }
    result = validate_payload(json.dumps(reply), TIMELINE_PLANNING)
    assert result.error.field == "analysis.phases[0].startDate"


def test_raw_reply_not_mutated():
    reply = _feature_reply()
    raw = json.dumps(reply)
    validate_payload(raw, FEATURE_ANALYSIS)
    assert json.loads(raw) == reply
