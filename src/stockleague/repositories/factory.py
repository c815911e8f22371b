"""Backend selection from explicit settings."""

import logging

from stockleague.config.settings import Settings
from stockleague.repositories.jsonfile import JsonFileRecordStore
from stockleague.repositories.protocols.record_store import RecordStore
from stockleague.repositories.sqlalchemy import (
    SqlAlchemyRecordStore,
    build_engine,
    build_session_factory,
    init_db,
)

logger = logging.getLogger(__name__)


def create_record_store(settings: Settings) -> RecordStore:
    """Build the record store named by settings.storage_backend."""
    if settings.storage_backend == "sql":
        database_url = settings.get_database_url()
        engine = build_engine(database_url)
        init_db(engine)
        logger.info("Using table record store at %s", engine.url.render_as_string(hide_password=True))
        return SqlAlchemyRecordStore(build_session_factory(engine))

    data_dir = settings.get_data_dir()
    logger.info("Using JSON file record store in %s", data_dir)
    return JsonFileRecordStore(data_dir)
