"""Shift mutation engine."""

from .rule_engine import RuleEngine

__all__ = ["RuleEngine"]
