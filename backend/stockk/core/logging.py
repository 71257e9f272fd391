import logging

DEV_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(filename)s:%(lineno)d] %(message)s"
PROD_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(environment: str = "development") -> None:
    """Configure le logging racine selon l'environnement.

    En production: niveau INFO, format compact. Sinon: niveau DEBUG avec
    l'emplacement dans le code source.
    """
    if environment.lower() == "production":
        logging.basicConfig(level=logging.INFO, format=PROD_FORMAT, force=True)
    else:
        logging.basicConfig(level=logging.DEBUG, format=DEV_FORMAT, force=True)
        # Les logs SQL sont pilotés par DB_ECHO_LOG, pas par le niveau racine
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger(__name__).debug(f"Logging configuré pour l'environnement '{environment}'.")
