"""ASGI entry point: ``uvicorn galaxy.main:app``."""

from dotenv import load_dotenv

# Load environment variables FIRST - before settings are read
load_dotenv()

from galaxy.config import get_settings  # noqa: E402
from galaxy.factory import create_app  # noqa: E402

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
