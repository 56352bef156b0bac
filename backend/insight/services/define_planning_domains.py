"""Planning Domain Descriptors: cost estimation, resource planning, timeline planning.

Invariants:
    - Money fields clamped at 0 (never negative), not rounded
    - Timeline phase/milestone dates are TIMESTAMP fields: validated as
      ISO-8601 and stored as aware datetimes
"""

from insight.core.domain_types import InputKind
from insight.core.shape import (
    DomainDescriptor, InputField, choice, number, objects, strings, text, timestamp,
)

COST_ESTIMATION = DomainDescriptor(
    name="cost-estimation",
    title="Cost estimate",
    storage_key="cost-estimation-storage",
    system_prompt=(
        "You are an expert cost analyst and project estimator. Analyze the "
        "given project details and provide a comprehensive cost estimate. "
        "Always respond with valid JSON."
    ),
    task="Generate a detailed cost estimate for this project",
    inputs=(
        InputField("project_name", "Project Name"),
        InputField("description", "Description"),
        InputField("timeline", "Timeline (months)", InputKind.NUMBER),
        InputField("team_size", "Team Size", InputKind.INTEGER),
    ),
    analysis=(
        number("totalCost", "total project cost in USD", minimum=0),
        number("monthlyBurn", "monthly burn rate in USD", minimum=0),
        objects(
            "breakdown",
            text("category"),
            number("amount", "number in USD", minimum=0),
            text("description"),
            choice("frequency", "one-time", "monthly", "yearly"),
        ),
        strings("assumptions"),
        strings("risks"),
    ),
    recommendations_hint="array of strings with cost optimization suggestions",
    success_message="Cost estimate generated successfully!",
)

RESOURCE_PLANNING = DomainDescriptor(
    name="resource-planning",
    title="Resource plan",
    storage_key="resource-planning-storage",
    system_prompt=(
        "You are an expert resource planner and project manager. Create "
        "detailed resource allocation plans with cost analysis. Always respond "
        "with valid JSON."
    ),
    task="Generate a detailed resource plan",
    inputs=(
        InputField("project_name", "Project Name"),
        InputField("description", "Description"),
        InputField("duration", "Duration (months)", InputKind.NUMBER),
        InputField("budget", "Budget ($)", InputKind.NUMBER),
        InputField("skills", "Required Skills", InputKind.LIST),
    ),
    analysis=(
        number("totalCost", "total cost in USD", minimum=0),
        number("monthlyBurn", "monthly burn rate in USD", minimum=0),
        objects(
            "requirements",
            text("role"),
            number("count", minimum=0, integral=True),
            strings("skills"),
            text("experience"),
            number("cost", "monthly cost in USD", minimum=0),
            text("availability"),
        ),
        objects(
            "timeline",
            text("phase"),
            strings("resources"),
            text("duration"),
        ),
        strings("risks"),
        strings("constraints"),
    ),
    recommendations_hint="array of strings with resource optimization suggestions",
    success_message="Resource plan generated successfully!",
    max_output_tokens=1500,
)

TIMELINE_PLANNING = DomainDescriptor(
    name="timeline-planning",
    title="Timeline",
    storage_key="timeline-planning-storage",
    system_prompt=(
        "You are an expert project manager and timeline planner. Create a "
        "detailed project timeline with phases and milestones. Always respond "
        "with valid JSON."
    ),
    task="Generate a detailed project timeline",
    inputs=(
        InputField("project_name", "Project Name"),
        InputField("description", "Description"),
        InputField("start_date", "Start Date", InputKind.DATE),
        InputField("end_date", "End Date", InputKind.DATE),
    ),
    analysis=(
        number("totalDuration", "number of days", minimum=0, integral=True),
        strings("criticalPath", "array of critical milestone titles"),
        choice("riskLevel", "high", "medium", "low"),
        objects(
            "phases",
            text("name"),
            text("description"),
            timestamp("startDate"),
            timestamp("endDate"),
            objects(
                "milestones",
                text("title"),
                text("description"),
                timestamp("startDate"),
                timestamp("endDate"),
                strings("dependencies"),
                strings("resources"),
                strings("deliverables"),
            ),
            strings("risks"),
        ),
        strings("assumptions"),
        strings("constraints"),
    ),
    recommendations_hint="array of strings with timeline optimization suggestions",
    success_message="Timeline generated successfully!",
    max_output_tokens=1500,
)

PLANNING_DOMAINS = (COST_ESTIMATION, RESOURCE_PLANNING, TIMELINE_PLANNING)
