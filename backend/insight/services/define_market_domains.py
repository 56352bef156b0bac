"""Market Domain Descriptors: market analysis, growth metrics, funding strategy, legal compliance.

Invariants:
    - Market analysis declares `competitors` as a top-level extra: the reply
      carries it beside "analysis", and the entity keeps it under extras
    - Percentages that are shares or probabilities clamp to 0-100;
      growth rates are left unclamped (they can be negative or above 100)
"""

from insight.core.domain_types import InputKind
from insight.core.shape import (
    DomainDescriptor, InputField, choice, number, objects, strings, text,
)

_HIGH_MEDIUM_LOW = ("high", "medium", "low")
_COMPLIANCE = ("compliant", "partial", "non-compliant")

MARKET_ANALYSIS = DomainDescriptor(
    name="market-analysis",
    title="Market analysis",
    storage_key="market-analysis-storage",
    system_prompt=(
        "You are an expert market analyst. Analyze the given market and "
        "provide detailed insights. Always respond with valid JSON."
    ),
    task="Analyze this market",
    inputs=(
        InputField("industry", "Industry"),
        InputField("target_market", "Target Market"),
        InputField("competitors", "Competitors", InputKind.LIST),
        InputField("region", "Region"),
    ),
    analysis=(
        number("marketSize", "number in millions USD", minimum=0),
        number("growthRate", "number as percentage"),
        objects(
            "segments",
            text("name"),
            number("size", "number in millions USD", minimum=0),
            number("growth", "number as percentage"),
            text("description"),
            strings("opportunities"),
            strings("challenges"),
        ),
        strings("trends"),
        strings("barriers"),
        strings("risks"),
    ),
    extras=(
        objects(
            "competitors",
            text("name"),
            strings("strengths"),
            strings("weaknesses"),
            number("marketShare", "number as percentage", minimum=0, maximum=100),
            choice("threat", *_HIGH_MEDIUM_LOW),
        ),
    ),
    recommendations_hint="array of strings with actionable market strategies",
    success_message="Market analysis completed successfully!",
    max_output_tokens=1500,
)

GROWTH_METRICS = DomainDescriptor(
    name="growth-metrics",
    title="Growth analysis",
    storage_key="growth-metrics-storage",
    system_prompt=(
        "You are an expert growth analyst. Analyze business metrics and "
        "provide detailed growth insights and recommendations. Always respond "
        "with valid JSON."
    ),
    task="Generate a detailed growth analysis for",
    inputs=(
        InputField("business_model", "Business Model"),
        InputField("mrr", "Monthly Recurring Revenue ($)", InputKind.NUMBER),
        InputField("customer_count", "Customer Count", InputKind.INTEGER),
        InputField("growth_goals", "Growth Goals"),
    ),
    analysis=(
        objects(
            "metrics",
            text("name"),
            number("value"),
            number("target"),
            choice("trend", "up", "down", "stable"),
            choice("status", "above", "below", "on-track"),
            strings("insights"),
        ),
        objects(
            "projections",
            text("timeframe"),
            number("revenue", minimum=0),
            number("customers", minimum=0, integral=True),
            number("probability", "number between 0-100", minimum=0, maximum=100),
        ),
        strings("challenges"),
        strings("opportunities"),
        objects(
            "kpis",
            text("name"),
            number("current"),
            number("target"),
            choice("importance", *_HIGH_MEDIUM_LOW),
        ),
    ),
    recommendations_hint="array of strings with actionable growth suggestions",
    success_message="Growth analysis generated successfully!",
    max_output_tokens=1500,
)

FUNDING_STRATEGY = DomainDescriptor(
    name="funding-strategy",
    title="Funding strategy",
    storage_key="funding-strategy-storage",
    system_prompt=(
        "You are an expert startup advisor and funding strategist. Create "
        "detailed funding strategies with valuation analysis. Always respond "
        "with valid JSON."
    ),
    task="Generate a detailed funding strategy",
    inputs=(
        InputField("stage", "Stage"),
        InputField("industry", "Industry"),
        InputField("monthly_revenue", "Monthly Revenue ($)", InputKind.NUMBER),
        InputField("funding_required", "Funding Required ($)", InputKind.NUMBER),
        InputField("use_of_funds", "Use of Funds"),
    ),
    analysis=(
        number("totalFunding", "total funding needed in USD", minimum=0),
        number("valuation", "estimated valuation in USD", minimum=0),
        objects(
            "sources",
            text("type"),
            text("description"),
            number("amount", "number in USD", minimum=0),
            strings("requirements"),
            strings("pros"),
            strings("cons"),
            text("timeline"),
        ),
        objects(
            "timeline",
            text("phase"),
            strings("activities"),
            text("duration"),
        ),
        strings("risks"),
        objects(
            "metrics",
            text("name"),
            text("target"),
            choice("importance", *_HIGH_MEDIUM_LOW),
        ),
    ),
    recommendations_hint="array of strings with funding strategy suggestions",
    success_message="Funding strategy generated successfully!",
    max_output_tokens=1500,
)

LEGAL_COMPLIANCE = DomainDescriptor(
    name="legal-compliance",
    title="Compliance report",
    storage_key="legal-compliance-storage",
    system_prompt=(
        "You are an expert legal compliance advisor. Analyze the business "
        "details and provide comprehensive compliance requirements and "
        "recommendations. Always respond with valid JSON."
    ),
    task="Generate a detailed compliance report for",
    inputs=(
        InputField("business_type", "Business Type"),
        InputField("regions", "Operating Regions", InputKind.LIST),
        InputField("data_handling", "Data Handling", InputKind.LIST),
        InputField("current_measures", "Current Measures"),
    ),
    analysis=(
        choice("overallStatus", *_COMPLIANCE),
        choice("riskLevel", *_HIGH_MEDIUM_LOW),
        objects(
            "requirements",
            text("category"),
            text("description"),
            choice("priority", *_HIGH_MEDIUM_LOW),
            choice("status", *_COMPLIANCE),
            strings("actions"),
            text("deadline"),
        ),
        strings("gaps"),
        strings("nextSteps"),
    ),
    recommendations_hint="array of strings with compliance improvement suggestions",
    success_message="Compliance report generated successfully!",
    max_output_tokens=1500,
)

MARKET_DOMAINS = (MARKET_ANALYSIS, GROWTH_METRICS, FUNDING_STRATEGY, LEGAL_COMPLIANCE)
