from pathlib import Path
import os

# Point the app at a throw-away database before `education.main` is imported;
# the app creates its tables at import time.
TEST_DB = Path(__file__).resolve().parents[1] / "test_education.db"
if TEST_DB.exists():
    TEST_DB.unlink()
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB}"
os.environ.setdefault("ENV", "dev")
