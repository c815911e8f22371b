"""Backend entrypoint for packaged app. Starts uvicorn with host and port from env."""
import os
import uvicorn

# Import app directly so a frozen bundle can resolve the package (uvicorn's
# string-based import fails under PyInstaller).
from stockleague.main import app


def main() -> None:
    host = os.environ.get("STOCKLEAGUE_HOST", "127.0.0.1")
    port = int(os.environ.get("STOCKLEAGUE_PORT", "8001"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
