"""surveyscore: scoring and narrative engine for tallied design surveys."""

__version__ = "0.1.0"
