"""Core orchestration: interfaces, models, services and strategies."""
