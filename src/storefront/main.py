from __future__ import annotations

import logging

from storefront.application.container import build_container
from storefront.config import get_app_paths, get_settings
from storefront.logging_config import setup_logging


def main() -> None:
    paths = get_app_paths()
    setup_logging(paths.logs_dir, level=logging.INFO)

    from storefront.ui.app import App

    container = build_container(get_settings())
    app = App(container, logs_dir=str(paths.logs_dir))
    app.mainloop()


if __name__ == "__main__":
    main()
