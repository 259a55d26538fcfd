#!/usr/bin/env python3
"""
Interactive local booking-search harness (no HTTP).

Usage:
  python3 scripts/search_local.py

Drives the same session objects the API builds, against whatever backend
the wiring picks (the in-memory mock when ENV=dev).
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.exceptions import (  # noqa: E402
    ActionNotAllowedError,
    BookingNotFoundError,
    WorkflowStateError,
)
from app.core.config import settings  # noqa: E402
from app.domain.booking_actions import RowAction  # noqa: E402
from app.domain.entities.result_set import derive_rows  # noqa: E402
from app.wiring.dependencies import (  # noqa: E402
    BookingSearchSession,
    build_session,
    get_backend,
    session_context,
)

HELP = """Commands:
  /set <field> <value>   -> set a filter (empty value clears it)
  /sort <column> asc|desc
  /next, /prev           -> page through results
  /size <n>              -> page size
  /reset                 -> back to default filters
  /menu <booking_no>     -> toggle the row's action menu
  /cancel <booking_no>   -> ask to cancel (then /yes or /no)
  /pay <booking_no>      -> collect payment
  /yes, /no              -> answer the cancel confirmation
  /show                  -> print the table again
  /quit"""


def _print_table(session: BookingSearchSession) -> None:
    controller = session.controller
    state = controller.filter_state
    print("\n--- Filters ---")
    print(
        f"status={state.status.value if state.status else '-'} "
        f"hall={state.community_hall_code or '-'} "
        f"from={state.from_date or '-'} to={state.to_date or '-'} "
        f"offset={state.offset} limit={state.limit} page={controller.current_page}"
    )
    for field, label in controller.field_errors.items():
        print(f"  ! {field}: {label}")

    print(f"\n--- Results ({controller.result_set.total_count}) ---")
    if controller.result_set.display_message:
        print(controller.result_set.display_message)
    for row in derive_rows(controller.result_set, settings.BOOKING_DETAILS_ROUTE):
        menu = "open" if session.rows.state(row.booking_no).menu_open else "closed"
        actions = [
            name
            for name, allowed in (("cancel", row.actions.can_cancel), ("pay", row.actions.can_collect_payment))
            if allowed
        ]
        print(
            f"{row.booking_no:<14} {row.applicant_name:<16} {row.community_hall:<6} "
            f"{row.booking_date:<25} {row.status:<20} menu={menu} actions={','.join(actions) or '-'}"
        )

    notification = session.outbox.notification
    if notification:
        print(f"\n({'error' if notification.error else 'info'}) {notification.label}")
    navigation = session.outbox.take_navigation()
    if navigation:
        print(f"\n-> navigate to {navigation.route}")
        print(f"   state: {navigation.state}")
    print("-" * 60)


async def _run_command(session: BookingSearchSession, cmd: str, args: list[str]) -> None:
    controller = session.controller
    if cmd == "/set" and args:
        value = " ".join(args[1:]) or None
        await controller.set_filter_field(args[0], value)
    elif cmd == "/sort" and args:
        descending = len(args) < 2 or args[1].lower() != "asc"
        await controller.set_sort(args[0], descending)
    elif cmd == "/next":
        await controller.next_page()
    elif cmd == "/prev":
        await controller.previous_page()
    elif cmd == "/size" and args and args[0].lstrip("-").isdigit():
        await controller.set_page_size(int(args[0]))
    elif cmd == "/reset":
        await controller.reset()
    elif cmd == "/menu" and args:
        session.rows.toggle(args[0])
    elif cmd == "/cancel" and args:
        await session.rows.select(args[0], RowAction.CANCEL)
        print(f"Cancel {args[0]}? (/yes or /no)")
        return
    elif cmd == "/pay" and args:
        outcome = await session.rows.select(args[0], RowAction.COLLECT_PAYMENT)
        print(f"payment: {outcome.value if outcome else '-'}")
    elif cmd == "/yes":
        accepted = await session.cancel.confirm()
        print("cancelled" if accepted else "cancellation failed")
    elif cmd == "/no":
        session.cancel.decline()
    elif cmd != "/show":
        print("Unknown command. /help for the list.")
        return
    _print_table(session)


async def main() -> None:
    session = build_session(get_backend(), session_context())
    await session.controller.initialize()
    print("\nLocal Booking Search Harness")
    print("-" * 60)
    print(f"tenant: {session.controller.context.tenant_id}")
    print("Commands: /help, /quit")
    _print_table(session)

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not line:
            continue
        cmd, *args = line.split()
        cmd = cmd.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print(HELP)
            continue

        try:
            await _run_command(session, cmd, args)
        except (ActionNotAllowedError, BookingNotFoundError, WorkflowStateError) as e:
            print(f"ERROR: {e}")


if __name__ == "__main__":
    asyncio.run(main())
