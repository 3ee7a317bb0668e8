import os

import uvicorn

from storefront.config import load_settings
from storefront.devserver import FakeBackend, create_app
from storefront.log import configure_logging


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level, settings.log_json)
    app = create_app(FakeBackend().seed())
    uvicorn.run(app, host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8080")))


if __name__ == "__main__":
    main()
