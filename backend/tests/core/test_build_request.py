"""Inference Request Builder: tests for prompt composition.

Invariants:
    - System prompt, temperature and token budget come from the descriptor
    - User prompt lists every input as 'Label: value' and embeds the shape
    - Pure: equal inputs give equal requests
"""

from insight.core.build_request import (
    build_generation_request, build_user_prompt, format_input_value,
)
from insight.core.shape import render_shape
from insight.services.define_market_domains import MARKET_ANALYSIS
from insight.services.define_planning_domains import COST_ESTIMATION
from insight.services.define_product_domains import FEATURE_ANALYSIS, TECH_STACK

_FEATURE_FORM = {"name": "Dark mode", "description": "Theme toggle for the app"}


def test_request_uses_descriptor_settings():
    req = build_generation_request(FEATURE_ANALYSIS, _FEATURE_FORM)
    assert req.system_prompt == FEATURE_ANALYSIS.system_prompt
    assert req.temperature == 0.7
    assert req.max_output_tokens == 1000
    assert req.model == FEATURE_ANALYSIS.model


def test_token_budgets_follow_descriptor():
    assert build_generation_request(MARKET_ANALYSIS, {}).max_output_tokens == 1500
    assert build_generation_request(TECH_STACK, {}).max_output_tokens == 2000


def test_user_prompt_layout():
    prompt = build_user_prompt(FEATURE_ANALYSIS, _FEATURE_FORM)
    lines = prompt.split("\n")
    assert lines[0] == "Analyze this feature and provide a detailed assessment:"
    assert lines[1] == "Name: Dark mode"
    assert lines[2] == "Description: Theme toggle for the app"
    assert "Return the analysis in this exact JSON format:" in lines
    assert render_shape(FEATURE_ANALYSIS) in prompt
    assert prompt.endswith(FEATURE_ANALYSIS.closing_note)


def test_list_inputs_joined():
    form = {
        "industry": "Fintech", "target_market": "SMB",
        "competitors": ["Stripe", "Square"], "region": "EU",
    }
    prompt = build_user_prompt(MARKET_ANALYSIS, form)
    assert "Competitors: Stripe, Square" in prompt


def test_whole_floats_rendered_as_ints():
    assert format_input_value(6.0) == "6"
    assert format_input_value(6.5) == "6.5"
    form = {"project_name": "X", "description": "Y", "timeline": 6.0, "team_size": 4}
    assert "Timeline (months): 6" in build_user_prompt(COST_ESTIMATION, form)


def test_messages_system_then_user():
    req = build_generation_request(FEATURE_ANALYSIS, _FEATURE_FORM)
    assert [m["role"] for m in req.messages] == ["system", "user"]
    assert req.messages[1]["content"] == req.user_prompt


def test_deterministic():
    a = build_generation_request(FEATURE_ANALYSIS, dict(_FEATURE_FORM))
    b = build_generation_request(FEATURE_ANALYSIS, dict(_FEATURE_FORM))
    assert a == b
