"""Domain Registry: lookup of every dashboard domain descriptor by name.

Invariants:
    - Names and storage keys are unique across all descriptors
    - get_descriptor() raises ResourceNotFoundError for unknown names (never KeyError)

Design Decisions:
    - Explicit imports from each define_*_domains.py: no auto-discovery
    - Model override applied with dataclasses.replace(): descriptors stay frozen
"""

from dataclasses import replace

from insight.core.errors import ResourceNotFoundError
from insight.core.shape import DomainDescriptor
from insight.services.define_market_domains import MARKET_DOMAINS
from insight.services.define_planning_domains import PLANNING_DOMAINS
from insight.services.define_product_domains import PRODUCT_DOMAINS

ALL_DOMAINS: tuple[DomainDescriptor, ...] = (
    *PRODUCT_DOMAINS,        # 4 domains
    *PLANNING_DOMAINS,       # 3 domains
    *MARKET_DOMAINS,         # 4 domains
)

_BY_NAME = {d.name: d for d in ALL_DOMAINS}


def domain_names() -> tuple[str, ...]:
    return tuple(_BY_NAME)


def get_descriptor(name: str) -> DomainDescriptor:
    descriptor = _BY_NAME.get(name)
    if descriptor is None:
        raise ResourceNotFoundError("Domain", name)
    return descriptor


def all_descriptors(model: str | None = None) -> tuple[DomainDescriptor, ...]:
    """Every descriptor, optionally re-targeted at a different model."""
    if model is None:
        return ALL_DOMAINS
    return tuple(replace(d, model=model) for d in ALL_DOMAINS)
