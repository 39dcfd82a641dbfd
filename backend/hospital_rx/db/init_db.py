from hospital_rx.db.base import Base
from hospital_rx.db.session import Database

# IMPORTANT: import models so they register with Base.metadata
import hospital_rx.db.models  # noqa: F401


def init_db(database: Database) -> None:
    Base.metadata.create_all(bind=database.engine)
