"""Services Layer: domain descriptors, generation stores, persistence adapter.

Invariants:
    - One GenerationStore per domain descriptor, never shared
    - Descriptor registry uses explicit imports (no auto-discovery)
"""
