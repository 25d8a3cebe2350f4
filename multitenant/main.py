import logging
from typing import Optional

from flask import Flask

from .config.config_manager import ConfigManager, ConfigRepository, Settings, configure_logging
from .tenancy.directory import Directory
from .tenancy.host import FlaskApplication, HostApplication
from .tenancy.models import Website

logger = logging.getLogger(__name__)


# Load settings from YAML file
def load_settings(filepath: Optional[str] = None) -> Settings:
    return ConfigManager(config_path=filepath).settings


# Flask app carrying the application-wide defaults tenants are merged over
def create_app(settings: Optional[Settings] = None) -> Flask:
    settings = settings or Settings()
    configure_logging(settings)

    app = Flask(settings.app_name)
    repository = ConfigRepository.from_settings(settings)
    for namespace, values in repository.all().items():
        app.config[namespace] = values
    app.config["CACHE_KEY_PREFIX"] = settings.cache.prefix

    return app


# Resolve, prepare and register one tenant into a host
def boot_tenant(website: Website, host: HostApplication, config: ConfigRepository) -> Directory:
    directory = Directory(website, config=config)
    if directory.base() is None:
        logger.warning(f"Tenant root not configured, website {website.id} runs without tenant paths")
        return directory

    if directory.old_base():
        directory.migrate_old_base()

    if config.get("multi-tenant.create-directories", True):
        report = directory.create()
        if not report:
            logger.error(f"Incomplete tenant directories for website {website.id}: {report.to_dict()}")

    return directory.register_paths(host)


def boot_flask_tenant(app: Flask, website: Website) -> Directory:
    config = ConfigRepository({k: v for k, v in app.config.items() if isinstance(v, dict)})
    return boot_tenant(website, FlaskApplication(app), config)
