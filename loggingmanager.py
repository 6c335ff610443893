""" A middleware to export user IDs for logging.

    Werkzeug logs the request after the Flask app context has ended
    so we use Werkzeug's Local object to pass the user and organization
    IDs into the logging formatter.
"""

import logging
from werkzeug.local import Local, LocalManager

local = Local()
local_manager = LocalManager([local])


class ContextFormatter(logging.Formatter):
    """ A logging formatter which inserts the user and organization
        IDs into the logging record. """
    def format(self, record):
        record.user = getattr(local, 'user_id', None)
        record.organization = getattr(local, 'organization_id', None)
        return logging.Formatter.format(self, record)


def set_user_id(uid, organization_id=None):
    """ Set the user and organization IDs for later use in logging. """
    local.user_id = uid
    local.organization_id = organization_id


def create_logging_manager(app):
    app.wsgi_app = local_manager.make_middleware(app.wsgi_app)
