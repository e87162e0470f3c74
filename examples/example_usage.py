"""Example: drive a monthly sheet through the service layer (no Flask).

Controllers are thin; the workspace holds the draft, the ledger and the
submission workflow for one signed-in user.
"""

import importlib

from datasender.container import build_container
from datasender.core.logging_config import setup_logging
from datasender.settings import get_settings_module


def main():
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(settings)

    ws = container.workspaces.get("example-user")
    ws.set_location(district="North District", congregation="Central Church")
    ws.update_draft({"sheet_number": "001", "day": "5", "members": "40", "guests": "5", "offerings": "120.50"})
    ws.add_current_entry()
    ws.update_draft({"day": "8", "service_type": "M", "members": "12", "offerings": "30"})
    ws.add_current_entry()

    print(ws.totals().as_dict())
    snapshot = ws.submit(submitted_by="Example")
    print(f"Submitted {snapshot.totals.entry_count} entries for {snapshot.month}/{snapshot.year}")


if __name__ == "__main__":
    main()
