from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_portal.hr_portal.database.bootstrap import ensure_demo_user

logger = logging.getLogger("seed_db")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or reset the demo login.")
    parser.add_argument("--email", default="admin@example.com")
    parser.add_argument("--name", default="Admin Demo")
    parser.add_argument("--password", default="admin123")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    user_id = ensure_demo_user(db_config, email=args.email, name=args.name, password=args.password)
    logger.info("Seeded %s (id=%s) -> %s/%s", args.email, user_id, db_config.get("host"), db_config.get("database"))


if __name__ == "__main__":
    main()
