"""Product Domain Descriptors: feature analysis, risk assessment, tech stack, pivot analysis.

Invariants:
    - Each descriptor is the single contract for its prompt shape AND validation
    - 1-100 gauges declared with score(): integral, clamped on normalize

Design Decisions:
    - One file per dashboard area keeps each descriptor list short
    - Tuple exports (not dict): the registry decides the lookup structure
"""

from insight.core.domain_types import InputKind
from insight.core.shape import (
    DomainDescriptor, InputField, choice, objects, score, strings, text, number,
)

_ALL_ARRAYS_NON_EMPTY = (
    "Ensure all number values are between 1-100 and all arrays contain at least one item."
)

FEATURE_ANALYSIS = DomainDescriptor(
    name="feature-analysis",
    title="Feature analysis",
    storage_key="feature-analysis-storage",
    system_prompt=(
        "You are an expert product manager and feature analyst. Analyze the "
        "given feature and provide detailed insights. Always respond with valid JSON."
    ),
    task="Analyze this feature and provide a detailed assessment",
    inputs=(
        InputField("name", "Name"),
        InputField("description", "Description"),
    ),
    analysis=(
        score("impact"),
        score("feasibility"),
        choice("priority", "high", "medium", "low"),
        text("timeEstimate", "string describing implementation time"),
        strings("dependencies", "array of strings listing technical and business dependencies"),
        strings("risks", "array of strings describing potential risks"),
    ),
    closing_note=_ALL_ARRAYS_NON_EMPTY,
    success_message="Feature analysis completed successfully!",
)

RISK_ASSESSMENT = DomainDescriptor(
    name="risk-assessment",
    title="Risk assessment",
    storage_key="risk-assessment-storage",
    system_prompt=(
        "You are an expert risk analyst. Analyze the given risk and provide "
        "detailed insights. Always respond with valid JSON."
    ),
    task="Analyze this risk and provide a detailed assessment",
    inputs=(
        InputField("name", "Name"),
        InputField("description", "Description"),
        InputField("category", "Category"),
    ),
    analysis=(
        score("probability"),
        score("impact"),
        choice("severity", "high", "medium", "low"),
        score("urgency"),
        strings("mitigation", "array of strings with mitigation strategies"),
        strings("contingency", "array of strings with contingency plans"),
    ),
    closing_note=_ALL_ARRAYS_NON_EMPTY,
    success_message="Risk analysis completed successfully!",
)

_TECHNOLOGY = (
    text("name"),
    text("category"),
    text("description"),
    strings("pros"),
    strings("cons"),
    choice("cost", "free", "paid", "enterprise"),
    choice("learningCurve", "low", "medium", "high"),
    strings("alternatives"),
)

TECH_STACK = DomainDescriptor(
    name="tech-stack",
    title="Tech stack recommendation",
    storage_key="tech-stack-storage",
    system_prompt=(
        "You are an expert software architect and tech stack advisor. Analyze "
        "project requirements and provide comprehensive technology "
        "recommendations. Always respond with valid JSON."
    ),
    task="Recommend a tech stack for this project",
    inputs=(
        InputField("project_type", "Project Type"),
        InputField("scale", "Scale & Performance"),
        InputField("budget", "Budget"),
        InputField("team_experience", "Team Experience"),
    ),
    analysis=(
        objects("frontend", *_TECHNOLOGY),
        objects("backend", *_TECHNOLOGY),
        objects("database", *_TECHNOLOGY),
        objects("devops", *_TECHNOLOGY),
        objects("testing", *_TECHNOLOGY),
        objects("monitoring", *_TECHNOLOGY),
        strings("considerations"),
        strings("risks"),
    ),
    recommendations_hint="array of strings with implementation recommendations",
    success_message="Tech stack recommendations generated successfully!",
    max_output_tokens=2000,
)

PIVOT_ANALYSIS = DomainDescriptor(
    name="pivot-analysis",
    title="Pivot analysis",
    storage_key="pivot-analysis-storage",
    system_prompt=(
        "You are an expert business strategist specializing in pivot analysis. "
        "Analyze the current business model and market conditions to provide "
        "strategic pivot recommendations. Always respond with valid JSON."
    ),
    task="Analyze pivot opportunities for",
    inputs=(
        InputField("current_model", "Current Business Model"),
        InputField("challenges", "Key Challenges", InputKind.LIST),
        InputField("market_changes", "Market Changes", InputKind.LIST),
        InputField("core_strengths", "Core Strengths", InputKind.LIST),
    ),
    analysis=(
        choice("pivotNecessity", "high", "medium", "low"),
        choice("urgency", "immediate", "medium-term", "long-term"),
        objects(
            "options",
            text("model"),
            text("description"),
            number("marketSize", "number in millions USD", minimum=0),
            choice("competitionLevel", "high", "medium", "low"),
            score("feasibility"),
            text("timeToMarket"),
            strings("resourceRequirements"),
            strings("risks"),
            strings("benefits"),
        ),
        objects(
            "impactAssessment",
            text("category"),
            choice("impact", "positive", "negative", "neutral"),
            strings("details"),
        ),
        strings("retainableAssets"),
    ),
    recommendations_hint="array of strings with strategic pivot suggestions",
    success_message="Pivot analysis generated successfully!",
    max_output_tokens=1500,
)

PRODUCT_DOMAINS = (FEATURE_ANALYSIS, RISK_ASSESSMENT, TECH_STACK, PIVOT_ANALYSIS)
