import logging
import logging.config
from pathlib import Path

import yaml
from flask import Flask
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

from loggingmanager import create_logging_manager

# If we have logging handlers set up here, don't touch them.
# This is especially problematic during testing as we don't
# want to overwrite pytest's handlers. Note: if anything
# logs before this point, logging.basicConfig will install
# a default stderr StreamHandler.
if len(logging.root.handlers) == 0 and Path("logging.yaml").is_file():
    install_logging = True
    with open("logging.yaml") as f:
        conf = yaml.load(f, Loader=yaml.FullLoader)
        if Path("logging.override.yaml").is_file():
            with open("logging.override.yaml") as fo:
                conf_overrides = yaml.load(fo, Loader=yaml.FullLoader)

                def update_logging(d, s):
                    for k, v in s.items():
                        if isinstance(v, dict):
                            d[k] = update_logging(d.get(k, {}), v)
                        elif v is not None:
                            d[k] = v
                    return d

                update_logging(conf, conf_overrides)

        logging.config.dictConfig(conf)

else:
    install_logging = False

logger = logging.getLogger(__name__)

naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class BaseModel(DeclarativeBase):
    metadata = MetaData(naming_convention=naming_convention)


db = SQLAlchemy(model_class=BaseModel)
migrate = Migrate()
login_manager = LoginManager()


def create_app(config_override=None):
    app = Flask(__name__)
    app.config.from_envvar("SETTINGS_FILE")
    if config_override:
        app.config.from_mapping(config_override)

    if "SECRET_KEY" not in app.config:
        raise RuntimeError("SECRET_KEY must be set in the app config")

    if install_logging:
        create_logging_manager(app)
        # Flask has now kindly installed its own log handler which we will summarily remove.
        app.logger.propagate = True
        app.logger.handlers = []
        if not app.debug:
            logging.root.setLevel(logging.INFO)
        else:
            logging.root.setLevel(logging.DEBUG)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from apps.common.auth import load_user_from_request, unauthorized

    login_manager.request_loader(load_user_from_request)
    login_manager.unauthorized_handler(unauthorized)

    @app.after_request
    def send_security_headers(response):
        response.headers["X-Frame-Options"] = "deny"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    from apps.common.errors import register_error_handlers

    register_error_handlers(app)

    @app.shell_context_processor
    def shell_imports():
        ctx = {}

        # Import models and constants
        import models

        for attr in dir(models):
            if attr[0].isupper():
                ctx[attr] = getattr(models, attr)

        # And just for convenience
        ctx["db"] = db

        return ctx

    from apps.base import base
    from apps.inventory import inventory
    from apps.organizations import organizations
    from apps.reports import reports
    from apps.volunteer import volunteer

    app.register_blueprint(base)
    app.register_blueprint(organizations, url_prefix="/api")
    app.register_blueprint(volunteer, url_prefix="/api")
    app.register_blueprint(inventory, url_prefix="/api")
    app.register_blueprint(reports, url_prefix="/api")

    return app
