"""Command-line interface for the weekly shift board."""

from __future__ import annotations

import argparse
import sys

from shiftboard.config import ShiftboardConfig, load_config
from shiftboard.domain.db import get_session_factory
from shiftboard.domain.errors import RuleViolation, ShiftboardError
from shiftboard.domain.models import DAY_NAMES, ShiftType
from shiftboard.domain.repositories import EmployeeRepository, SqlShiftRepository
from shiftboard.engine.rule_engine import RuleEngine
from shiftboard.io.export_csv import export_shifts_csv, export_weekly_hours_csv
from shiftboard.io.import_csv import import_shifts_csv
from shiftboard.services.weekly import WeeklyView, weekly_hours_frame
from shiftboard.timeutils import format_minutes


def _config(args: argparse.Namespace) -> ShiftboardConfig:
    cfg = load_config(args.config)
    if args.db:
        cfg.db_url = args.db
    return cfg


def _repository(cfg: ShiftboardConfig) -> SqlShiftRepository:
    return SqlShiftRepository(get_session_factory(cfg.db_url), key=cfg.storage_key)


def _day(value: str) -> int:
    """Accept 0-6 or a weekday name/prefix."""
    if value.isdigit():
        return int(value)
    for i, name in enumerate(DAY_NAMES):
        if name.lower().startswith(value.lower()[:3]):
            return i
    raise argparse.ArgumentTypeError(f"Unknown day: {value}")


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    cfg = _config(args)
    get_session_factory(cfg.db_url)
    print(f"[OK] Database initialized: {cfg.db_url}")


def _cmd_add_employee(args: argparse.Namespace) -> None:
    cfg = _config(args)
    session = get_session_factory(cfg.db_url)()
    try:
        emp = EmployeeRepository.create(session, args.name, role=args.role, employee_id=args.id)
        print(f"[OK] Added employee {emp.id} ({emp.name})")
    finally:
        session.close()


def _cmd_list_employees(args: argparse.Namespace) -> None:
    cfg = _config(args)
    session = get_session_factory(cfg.db_url)()
    try:
        for emp in EmployeeRepository.get_all(session, include_inactive=not args.active_only):
            print(f"{emp.id}\t{emp.name}\t{emp.role or ''}\t{emp.status}")
    finally:
        session.close()


def _employee_status_command(action: str):
    def _run(args: argparse.Namespace) -> None:
        cfg = _config(args)
        session = get_session_factory(cfg.db_url)()
        try:
            if action == "remove":
                found = EmployeeRepository.remove(session, args.employee)
            else:
                found = getattr(EmployeeRepository, action)(session, args.employee) is not None
        finally:
            session.close()
        if found:
            print(f"[OK] Employee {args.employee}: {action} done")
        else:
            print(f"[WARN] Employee {args.employee} not found")
    return _run


def _cmd_add_shift(args: argparse.Namespace) -> None:
    cfg = _config(args)
    engine = RuleEngine(_repository(cfg), cfg)
    snapshot = engine.add_shift(args.employee, args.day, args.type, args.start, args.end)
    print(f"[OK] Shift added; {len(snapshot)} shifts stored")


def _cmd_update_shift(args: argparse.Namespace) -> None:
    cfg = _config(args)
    engine = RuleEngine(_repository(cfg), cfg)
    patch = {
        name: value
        for name, value in (
            ("employee_id", args.employee),
            ("day_index", args.day),
            ("type", args.type),
            ("start", args.start),
            ("end", args.end),
        )
        if value is not None
    }
    updated = engine.update_shift(args.shift_id, patch)
    if updated is None:
        print(f"[WARN] Shift {args.shift_id} not found; nothing changed")
    else:
        print(f"[OK] Updated {updated!r}")


def _cmd_delete_shift(args: argparse.Namespace) -> None:
    cfg = _config(args)
    engine = RuleEngine(_repository(cfg), cfg)
    removed = engine.delete_shift(args.shift_id)
    if removed is None:
        print(f"[WARN] Shift {args.shift_id} not found; nothing changed")
    else:
        print(f"[OK] Deleted {removed!r}")


def _cmd_week(args: argparse.Namespace) -> None:
    cfg = _config(args)
    view = WeeklyView(_repository(cfg))
    for day, shifts in view.get_week_schedule(args.employee).items():
        print(DAY_NAMES[day])
        for s in shifts:
            times = f"{s.start}-{s.end}" if s.has_times else ""
            print(f"  {s.type.label:<15} {times:<12} {s.id}")
    print(f"Total: {format_minutes(view.get_weekly_minutes(args.employee))}")


def _cmd_hours(args: argparse.Namespace) -> None:
    cfg = _config(args)
    session_factory = get_session_factory(cfg.db_url)
    shifts = SqlShiftRepository(session_factory, key=cfg.storage_key).load()
    session = session_factory()
    try:
        employees = EmployeeRepository.get_all(session)
        summary = weekly_hours_frame(shifts, employees, threshold_hours=cfg.weekly_hours_threshold)
    finally:
        session.close()
    if args.out:
        export_weekly_hours_csv(summary, args.out)
    else:
        print(summary.to_string(index=False))


def _cmd_export(args: argparse.Namespace) -> None:
    cfg = _config(args)
    count = export_shifts_csv(_repository(cfg).load(), args.out)
    print(f"[OK] Exported {count} shifts to {args.out}")


def _cmd_import(args: argparse.Namespace) -> None:
    cfg = _config(args)
    shifts = import_shifts_csv(args.path)
    _repository(cfg).save(shifts)
    print(f"[OK] Replaced snapshot with {len(shifts)} shifts")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="shiftboard",
        description="Weekly recurring shift schedule with on-call rest rules",
    )
    
    # Global options
    parser.add_argument("--db", help="Database URL (default from config: sqlite:///shiftboard.db)")
    parser.add_argument("--config", help="Path to config YAML/JSON")
    
    sub = parser.add_subparsers(dest="command", required=True)
    
    sub.add_parser("init-db", help="Initialize database").set_defaults(func=_cmd_init_db)
    
    emp = sub.add_parser("add-employee", help="Add an employee to the roster")
    emp.add_argument("name")
    emp.add_argument("--role")
    emp.add_argument("--id", help="Explicit employee id (default: generated)")
    emp.set_defaults(func=_cmd_add_employee)
    
    lst = sub.add_parser("list-employees", help="List the roster")
    lst.add_argument("--active-only", action="store_true")
    lst.set_defaults(func=_cmd_list_employees)
    
    for name, action in (
        ("deactivate-employee", "deactivate"),
        ("reactivate-employee", "reactivate"),
        ("remove-employee", "remove"),
    ):
        p = sub.add_parser(name, help=f"{action.capitalize()} an employee")
        p.add_argument("employee")
        p.set_defaults(func=_employee_status_command(action))
    
    add = sub.add_parser("add-shift", help="Add a shift (applies rest, split and merge rules)")
    add.add_argument("--employee", required=True)
    add.add_argument("--day", required=True, type=_day, help="0-6 or weekday name")
    add.add_argument("--type", required=True, choices=[t.value for t in ShiftType])
    add.add_argument("--start", help="HH:MM (default from config)")
    add.add_argument("--end", help="HH:MM (default from config)")
    add.set_defaults(func=_cmd_add_shift)
    
    upd = sub.add_parser("update-shift", help="Patch a shift's fields (no rules applied)")
    upd.add_argument("shift_id")
    upd.add_argument("--employee")
    upd.add_argument("--day", type=_day)
    upd.add_argument("--type", choices=[t.value for t in ShiftType])
    upd.add_argument("--start")
    upd.add_argument("--end")
    upd.set_defaults(func=_cmd_update_shift)
    
    dele = sub.add_parser("delete-shift", help="Delete a shift")
    dele.add_argument("shift_id")
    dele.set_defaults(func=_cmd_delete_shift)
    
    week = sub.add_parser("week", help="Show an employee's week")
    week.add_argument("--employee", required=True)
    week.set_defaults(func=_cmd_week)
    
    hours = sub.add_parser("hours", help="Weekly hours for every employee")
    hours.add_argument("--out", help="Optional: write the summary to CSV")
    hours.set_defaults(func=_cmd_hours)
    
    exp = sub.add_parser("export", help="Export the shift snapshot to CSV")
    exp.add_argument("--out", required=True)
    exp.set_defaults(func=_cmd_export)
    
    imp = sub.add_parser("import", help="Replace the shift snapshot from CSV")
    imp.add_argument("path")
    imp.set_defaults(func=_cmd_import)
    
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except RuleViolation as e:
        print(f"[ERROR] {e}")
        sys.exit(1)
    except ShiftboardError as e:
        print(f"[ERROR] {e}")
        raise


if __name__ == "__main__":
    main()
