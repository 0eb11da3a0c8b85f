"""Interactive console for the cashier session history."""

import asyncio
from datetime import date
from pathlib import Path

from cashledger.core.db import AsyncSessionLocal
from cashledger.core.session_history import SessionHistoryView
from cashledger.core.session_repository import SessionRepository
from cashledger.models import FilterCriteria, SessionRecord
from cashledger.models.enums import StatusFilter

MENU = """
[l] list   [f] filter   [d] detail   [x] delete   [e] export csv   [r] reload   [q] quit
"""


def display_sessions(view: SessionHistoryView) -> None:
    visible = view.visible
    summary = view.summary
    print(f"\n📋 Sessions ({summary.session_count}) | total sales {summary.total_sales} "
          f"| avg variance {summary.average_variance}")
    for idx, s in enumerate(visible, 1):
        variance = s.variance if s.variance is not None else "-"
        print(f"   {idx:>3}. {s.user_name:<20} {s.opened_at:%Y-%m-%d %H:%M} "
              f"{s.status.value:<6} sales {s.total_sales} variance {variance}")


def _parse_date(raw: str) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        print(f"❌ Invalid date {raw!r}, ignored")
        return None


def get_filter_input() -> FilterCriteria:
    """Collect filter criteria from CLI input. Empty answers leave a filter off."""
    query = input("Search (name or ID): ").strip() or None
    date_from = _parse_date(input("From (YYYY-MM-DD): ").strip())
    date_to = _parse_date(input("To (YYYY-MM-DD): ").strip())
    status_input = input("Status (all/open/closed) [all]: ").strip().capitalize() or "All"
    try:
        status = StatusFilter(status_input)
    except ValueError:
        status = StatusFilter.ALL
    return FilterCriteria(query=query, date_from=date_from, date_to=date_to, status=status)


def pick_session(view: SessionHistoryView) -> SessionRecord | None:
    visible = view.visible
    try:
        idx = int(input("Session number: ").strip())
        return visible[idx - 1] if 1 <= idx <= len(visible) else None
    except ValueError:
        return None


def display_detail(session: SessionRecord) -> None:
    print(f"\n🧾 {session.user_name} ({session.id})")
    print(f"   Status:        {session.status.value}")
    print(f"   Opened:        {session.opened_at}")
    print(f"   Closed:        {session.closed_at or '-'}")
    print(f"   Starting cash: {session.starting_cash}")
    print(f"   Total sales:   {session.total_sales}")
    print(f"   Expected cash: {session.expected_cash}")
    print(f"   Ending cash:   {session.ending_cash if session.ending_cash is not None else '-'}")
    print(f"   Variance:      {session.variance if session.variance is not None else '-'}")


async def handle_delete(view: SessionHistoryView) -> None:
    session = pick_session(view)
    if session is None:
        print("❌ Invalid selection")
        return

    view.request_delete(session)
    answer = input(
        f"Delete session of {session.user_name} opened {session.opened_at:%Y-%m-%d}? "
        "This cannot be undone. (y/n) [n]: "
    ).strip().lower()
    if answer != "y":
        view.cancel_delete()
        print("Cancelled")
        return

    if await view.confirm_delete():
        print("✅ Session deleted")
    else:
        print(f"❌ {view.error_message}")


async def run_console():
    async with AsyncSessionLocal() as db:
        view = SessionHistoryView(SessionRepository(db))
        if not await view.reload():
            print(f"❌ {view.error_message}")

        while True:
            choice = input(MENU + "> ").strip().lower()
            if choice == "q":
                break
            if choice == "l":
                display_sessions(view)
            elif choice == "f":
                view.set_criteria(get_filter_input())
                display_sessions(view)
            elif choice == "d":
                session = pick_session(view)
                if session:
                    view.open_detail(session)
                    display_detail(session)
            elif choice == "x":
                await handle_delete(view)
            elif choice == "e":
                filename, content = view.export_csv()
                Path(filename).write_text(content, encoding="utf-8")
                print(f"✅ Exported {len(view.visible)} sessions to {filename}")
            elif choice == "r":
                if await view.reload():
                    print("✅ Reloaded")
                else:
                    print(f"❌ {view.error_message}")


if __name__ == "__main__":
    asyncio.run(run_console())
