import logging
from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie

from visitor_training.core.setting import config
from visitor_training.core.exceptions import ConfigurationError, StoreUnavailable
from visitor_training.core.models.attempt import TrainingAttempt

logger = logging.getLogger(__name__)


motor_client = None
_store_ready = False

async def init_store(database):
    """
    Register the document models against a database handle.
    connect_to_mongo() uses it for the real store; tests hand in a mock database.
    """
    global _store_ready

    await init_beanie(
        database=database,
        document_models=[
            TrainingAttempt,
        ]
    )
    _store_ready = True

async def connect_to_mongo():
    global motor_client

    missing = config.missing_store_credentials()
    if missing:
        # Requests touching the store report this; startup carries on.
        logger.error(f"Record store not configured, missing: {', '.join(missing)}")
        return

    if motor_client is None:
        motor_client = AsyncIOMotorClient(
            str(config.STORE_URL),
            username=config.STORE_USERNAME,
            password=config.STORE_ACCESS_KEY,
        )

    try:
        await init_store(motor_client[config.DATABASE_NAME])
    except Exception as e:
        logger.error(f"Record store unreachable: {e}")
        return
    logger.info(f"Successfully connected to record store {config.DATABASE_NAME}")

async def close_mongo_connection():
    global motor_client, _store_ready
    if motor_client:
        motor_client.close()
        motor_client = None
    _store_ready = False
    logger.info("Closed record store connection")

def reset_store():
    """Forget the registered store. Used between tests."""
    global _store_ready
    _store_ready = False

async def ensure_store_ready():
    """
    Called by every operation that touches the record store, after its input
    has been validated. A store that was down at startup is connected here on
    the next request.

    Raises:
        ConfigurationError: credentials are missing
        StoreUnavailable: credentials are set but the store can't be reached
    """
    missing = config.missing_store_credentials()
    if missing:
        logger.error(f"Rejecting store request, missing configuration: {', '.join(missing)}")
        raise ConfigurationError("Missing record store credentials")
    if not _store_ready:
        await connect_to_mongo()
    if not _store_ready:
        raise StoreUnavailable("Record store is not connected")
