import logging

import pycouchdb

from app.settings import Settings, settings

logger = logging.getLogger(__name__)


def get_couch(settings_obj: Settings = settings):
    """
    Create a CouchDB database handle, creating the database on first use.
    Called at runtime to avoid import-time connections.
    """
    couch = pycouchdb.Server(settings_obj.couchdb_url)
    try:
        return couch.database(settings_obj.COUCHDB_DATABASE)
    except pycouchdb.exceptions.NotFound:
        logger.info(f"Creating CouchDB database {settings_obj.COUCHDB_DATABASE}")
        return couch.create(settings_obj.COUCHDB_DATABASE)
