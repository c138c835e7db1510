"""Entry point for the Study Guide Generator."""

import logging
import subprocess
import sys

from src.config import load_config
from src.storage.database import initialize_database


def main() -> None:
    """Initialize the application and launch the Streamlit UI."""
    config = load_config()
    logging.basicConfig(
        level=config.app.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize SQLite database
    initialize_database(config.storage.sqlite_path)

    # Launch Streamlit
    subprocess.run(
        [
            sys.executable,
            "-m",
            "streamlit",
            "run",
            "src/ui/app.py",
            "--server.port",
            "8501",
            "--server.headless",
            "true",
            "--server.maxUploadSize",
            str(config.upload.max_file_mb),
        ],
        check=False,
    )


if __name__ == "__main__":
    main()
