"""Weekly recurring shift schedule with coupling rules.

Modules:
- timeutils: HH:MM arithmetic and overnight-corrected durations
- config: default hours table and storage settings (YAML or JSON)
- domain: shift records, SQLAlchemy tables, repositories, errors
- services: pure rule transformations and weekly views
- engine: RuleEngine, the snapshot writer
- io: CSV import/export
- cli: command-line interface entrypoints
"""

__all__ = [
    "timeutils",
    "config",
    "domain",
    "services",
    "engine",
    "io",
    "cli",
]
