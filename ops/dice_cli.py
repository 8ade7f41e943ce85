#!/usr/bin/env python3
"""
Dice CLI: register, inspect and roll probabilistic trigger slots.

Slot management:
  dice_cli.py register <name> [options]   Register (or replace) a slot
  dice_cli.py unregister <name>           Remove a slot
  dice_cli.py list                        List registered slots

Per-slot operations (current session):
  dice_cli.py status <name>               Dice count, odds, next die
  dice_cli.py roll <name>                 Roll without state change (dry run)
  dice_cli.py reset <name>                Re-baseline the accumulator
  dice_cli.py clear <name>                Clear state and cooldown

Session:
  dice_cli.py check                       Full shared-pool pass (what the Stop hook does)
  dice_cli.py session-start               Clear slots flagged clearOnSessionStart

The session comes from --session, else CC_DICE_SESSION_ID, else a hash of the
working directory. Depth comes from the session's transcript when found.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "lib"))

from core import setup_script, finalize, logger, handle_debug, safe_execute  # noqa: E402
from _dice_config import COOLDOWN_POLICIES, SLOT_KINDS, TARGET_MODES  # noqa: E402
from dice import (  # noqa: E402
    CheckContext,
    check_all_slots,
    clear_slot,
    dry_roll,
    get_slot,
    get_slot_status,
    get_transcript_path,
    list_slots,
    register_slot,
    reset_slot,
    session_start,
    unregister_slot,
)


def build_context(args) -> CheckContext:
    session_id = getattr(args, "session", None)
    return CheckContext(
        session_id=session_id, transcript_path=get_transcript_path(session_id)
    )


def _require_slot(name: str):
    config = get_slot(name)
    if config is None:
        finalize(success=False, message=f"Slot not found: {name}")
    return config


# =============================================================================
# COMMANDS
# =============================================================================


def cmd_register(args):
    # Options left unset fall through to slot_defaults in dice_settings.json
    fields = {
        "target_mode": args.target_mode,
        "kind": args.type,
        "accumulation_rate": args.accumulation_rate,
        "max_dice": args.max_dice,
        "fixed_count": args.fixed_count,
        "cooldown": args.cooldown,
    }
    fields = {k: v for k, v in fields.items() if v is not None}
    if args.no_clear_on_start:
        fields["clear_on_session_start"] = False
    if args.no_reset_on_trigger:
        fields["reset_on_trigger"] = False
    if args.no_flavor:
        fields["flavor"] = False

    config = register_slot(
        args.name,
        die=args.die,
        target=args.target,
        message=args.message or f"Dice trigger: {args.name}",
        **fields,
    )
    print(
        f"Registered: {config.name} ({config.kind}, d{config.die}, "
        f"target={config.target} {config.target_mode})"
    )


def cmd_unregister(args):
    if not unregister_slot(args.name):
        finalize(success=False, message=f"Slot not found: {args.name}")
    print(f"Removed slot: {args.name}")


def cmd_list(args):
    slots = list_slots()
    if not slots:
        print("No slots registered.")
        return
    for slot in slots:
        print(
            f"  {slot.name} ({slot.kind}, {slot.die}-sided, "
            f"target={slot.target} {slot.target_mode})"
        )


def cmd_status(args):
    _require_slot(args.name)
    status = get_slot_status(args.name, build_context(args))
    print(f"Slot: {status.name} ({status.kind})")
    print(f"  Session:         {status.session_id}")
    print(f"  Dice count:      {status.dice_count}")
    print(f"  Current depth:   {status.current_depth}")
    print(f"  Since trigger:   {status.depth_since_trigger}")
    print(f"  Probability:     {status.probability}%")
    if status.kind == "accumulator":
        print(f"  Next die at:     depth {status.next_dice_at}")
    if status.on_cooldown:
        print("  Cooldown:        already triggered this session")


def cmd_roll(args):
    config = _require_slot(args.name)
    result = dry_roll(args.name, build_context(args))
    if result.dice_count <= 0:
        print(f"{args.name}: 0 dice (no roll)")
        return
    rolls = ", ".join(str(r) for r in result.rolls)
    print(
        f"{args.name}: {result.dice_count}d{config.die} = [{rolls}] "
        f"(best: {result.best}, {result.probability}%)"
        f"{' TRIGGERED!' if result.triggered else ''}"
    )


def cmd_reset(args):
    _require_slot(args.name)
    reset_slot(args.name, build_context(args))
    print(f"Reset slot: {args.name}")


def cmd_clear(args):
    _require_slot(args.name)
    clear_slot(args.name, build_context(args))
    print(f"Cleared slot: {args.name}")


def cmd_check(args):
    results = check_all_slots(build_context(args))
    if not results:
        print("No slots registered.")
        return
    for result in results:
        rolls = ", ".join(str(r) for r in result.rolls)
        flag = " TRIGGERED!" if result.triggered else ""
        print(
            f"  {result.slot_name}: {result.dice_count} dice [{rolls}] "
            f"({result.probability}%){flag}"
        )


def cmd_session_start(args):
    cleared = session_start(build_context(args))
    print(f"Cleared: {', '.join(cleared) if cleared else '(none)'}")


COMMANDS = {
    "register": cmd_register,
    "unregister": cmd_unregister,
    "list": cmd_list,
    "status": cmd_status,
    "roll": cmd_roll,
    "reset": cmd_reset,
    "clear": cmd_clear,
    "check": cmd_check,
    "session-start": cmd_session_start,
}


def build_parser():
    parser = setup_script("Dice CLI: probabilistic trigger slots for Claude Code hooks")
    parser.add_argument("--session", help="Session id (default: CC_DICE_SESSION_ID or cwd hash)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # register
    p_reg = subparsers.add_parser("register", help="Register a dice slot")
    p_reg.add_argument("name", help="Slot name")
    p_reg.add_argument("--die", type=int, default=20, help="Die size (default: 20)")
    p_reg.add_argument("--target", type=int, default=20, help="Target number (default: 20)")
    p_reg.add_argument("--target-mode", choices=TARGET_MODES, help="Default: exact")
    p_reg.add_argument("--type", choices=SLOT_KINDS, help="Default: accumulator")
    p_reg.add_argument(
        "--accumulation-rate", type=int, help="Turns per +1 die (default: 7)"
    )
    p_reg.add_argument("--max-dice", type=int, help="Max dice cap (default: 100)")
    p_reg.add_argument(
        "--fixed-count", type=int, help="Dice count for fixed type (default: 1)"
    )
    p_reg.add_argument("--cooldown", choices=COOLDOWN_POLICIES, help="Default: per-session")
    p_reg.add_argument(
        "--no-clear-on-start", action="store_true", help="Don't clear on session start"
    )
    p_reg.add_argument(
        "--no-reset-on-trigger",
        action="store_true",
        help="Don't reset accumulator on trigger",
    )
    p_reg.add_argument(
        "--no-flavor", action="store_true", help="Don't prepend the dice roll line"
    )
    p_reg.add_argument("--message", help="Trigger message shown to Claude")

    # single-slot commands
    for command, help_text in (
        ("unregister", "Remove a slot"),
        ("status", "Show current dice status"),
        ("roll", "Roll without state change (dry run)"),
        ("reset", "Reset accumulator"),
        ("clear", "Clear state and cooldown"),
    ):
        p = subparsers.add_parser(command, help=help_text)
        p.add_argument("name", help="Slot name")

    subparsers.add_parser("list", help="List all registered slots")
    subparsers.add_parser("check", help="Roll all slots with shared dice pools")
    subparsers.add_parser("session-start", help="Clear slots flagged for session start")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    handle_debug(args)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        finalize(success=args.command is None)

    logger.debug(f"dice: running {args.command}")
    safe_execute(handler, args)
    finalize(success=True)


if __name__ == "__main__":
    main()
