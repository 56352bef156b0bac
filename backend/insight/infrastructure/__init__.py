"""Infrastructure Layer: Anthropic client, database sessions, key-value storage, logging."""
