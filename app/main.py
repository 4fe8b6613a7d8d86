import uvicorn

from app.api.app import create_app
from app.api.services import ServicesFactory
from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.logging.logger import Log


def main() -> None:
    """Entry point: initialize pool -> build services -> serve HTTP."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        services = ServicesFactory.create(settings)
        services.lifecycle.ensure_bucket()
        app = create_app(settings, services)
        Log.info(
            "Server starting",
            port=settings.port,
            environment=settings.app_env,
            scratch_dir=settings.scratch_dir,
        )
        uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    finally:
        close_pool()


if __name__ == "__main__":
    main()
