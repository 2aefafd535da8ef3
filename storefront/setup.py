def run():
    """
    Run before every entry point:
        fastapi server
        alembic
        test suite
    """
    from loguru import logger

    from storefront.common.logs import configure_logging

    configure_logging()
    configure_models()

    logger.info('application setup complete ✅')


def configure_models():
    """
    When using declarative we need to run this for our entry points
    to have context on our models / relationships example when
    traversing "user.id" as a foreign key
    """
    from storefront.common.model import import_model_modules

    import_model_modules()
