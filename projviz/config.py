import os
from pathlib import Path

# Load .env from repo root before any setting below reads os.environ
try:
    from dotenv import load_dotenv
    _env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(_env_path, override=False)
except ImportError:
    pass  # python-dotenv not installed; export PROJVIZ_* in the shell

LOG_LEVEL = os.environ.get("PROJVIZ_LOG_LEVEL", "INFO").upper()
DEFAULT_TIMEFRAME = os.environ.get("PROJVIZ_DEFAULT_TIMEFRAME", "one_year_monthly")
DEFAULT_DATASET_MODE = os.environ.get("PROJVIZ_DEFAULT_DATASET_MODE", "both")
IDENTICAL_TOLERANCE = float(os.environ.get("PROJVIZ_IDENTICAL_TOLERANCE", "1e-6"))
