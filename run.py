import logging

from utils.logging_config import setup_logging

# Initialize centralized logging configuration
setup_logging()

from web.app import main

# Silence SQL loggers after the engine is imported
for logger_name in ['aiosqlite', 'sqlalchemy', 'sqlalchemy.engine', 'sqlalchemy.pool', 'sqlalchemy.orm']:
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.CRITICAL)
    logger.propagate = False
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.addHandler(logging.NullHandler())

logging.info("🔇 SQL loggers silenced (aiosqlite, sqlalchemy.*)")


if __name__ == '__main__':
    logging.info("Starting storefront API")
    main()
