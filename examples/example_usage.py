"""Example: drive the service layer directly (no Flask).

Controllers stay thin; the admission rules live in the services.
"""

import importlib

from config import get_settings_module

from src.canteen_admin.canteen_admin.container import build_container
from src.canteen_admin.canteen_admin.core.enums import MealSlot


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    result = container.admission_service.admit(1, MealSlot.BREAKFAST)
    print(result.message)
    print(container.dashboard_service.summary())


if __name__ == "__main__":
    main()
