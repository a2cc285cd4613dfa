import os

import dotenv

# Values below are bound at import time.
dotenv.load_dotenv()

LAYOUT_OVERRIDE: str = os.getenv("PROPOSAL_LAYOUT", "auto").strip()

SECONDARY_SHEET_MARKER: str = os.getenv(
    "PROPOSAL_SECONDARY_SHEET", "PRODUTOS G"
).strip().upper()

VALIDITY_DAYS: int = int(os.getenv("PROPOSAL_VALIDITY_DAYS", "30"))

PLAN_PREFIX: str = os.getenv("PROPOSAL_PLAN_PREFIX", "KLINI").strip()
