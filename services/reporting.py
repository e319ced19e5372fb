from __future__ import annotations

from typing import List

from models.contact_event import ContactEvent
from models.quota import QuotaStatus


def print_quota_summary(status: QuotaStatus, events: List[ContactEvent] | None = None) -> None:
    """Print a human-readable summary of today's contact quota."""
    print("\n" + "="*60)
    print("DEVELOPER DIRECTORY - DAILY CONTACT QUOTA")
    print("="*60)
    print(f"Day (UTC): {status.day}")
    print(f"Developers Contacted: {status.consumed_today}")
    print(f"Remaining: {status.remaining} of {status.limit}")
    print(f"Resets At: {status.resets_at}")
    if events:
        print()
        print("Contacted Today:")
        for event in events:
            print(f"  {event.developer_id} at {event.created_at}")
    print("="*60)
