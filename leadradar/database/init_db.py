"""Create the LeadRadar schema: ``python -m leadradar.database.init_db``."""

import logging

from leadradar.core.startup import bootstrap
from leadradar.database.db import create_tables, get_engine

logger = logging.getLogger(__name__)


def init_db() -> list[str]:
    report = bootstrap()
    tables = create_tables(get_engine())
    logger.info(
        "database.tables.created",
        extra={"event": "database.tables.created", "scheme": report.database_scheme, "table_count": len(tables)},
    )
    return tables


if __name__ == "__main__":
    init_db()
