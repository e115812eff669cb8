"""Create the data directory and apply database migrations."""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.database import run_migrations, sqlite_data_dir
from app.logging_config import configure_logging


def main() -> None:
    configure_logging()
    data_dir = sqlite_data_dir()
    if data_dir is not None:
        data_dir.mkdir(parents=True, exist_ok=True)
    run_migrations()
    print("Database initialised at", data_dir or "configured DATABASE_URL")


if __name__ == "__main__":
    main()
