"""Relationship duration, anniversaries and milestones (pure date arithmetic)."""
