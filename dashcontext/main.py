"""dashcontext entrypoint."""

import uvicorn

from dashcontext.config.settings import get_settings


def cli() -> None:
    """CLI entrypoint."""
    settings = get_settings()
    uvicorn.run("dashcontext.web.app:create_app", factory=True, reload=settings.debug)


if __name__ == "__main__":
    cli()
