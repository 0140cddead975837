# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Store package: the persistence contract and the backend chosen at startup."""
from commander.core.logging import get_logger
from commander.stores.base import ProfessionalStore
from commander.stores.memory_store import MemoryProfessionalStore

logger = get_logger(__name__)


def create_store(settings) -> ProfessionalStore:
    """Build the backend named by ``settings.store_backend``."""
    backend = settings.store_backend
    if backend == "dynamodb":
        from commander.stores.dynamo_store import DynamoProfessionalStore
        store = DynamoProfessionalStore(
            endpoint_url=settings.DYNAMODB_ENDPOINT,
            region_name=settings.AWS_REGION,
            table_prefix=settings.DYNAMODB_TABLE_PREFIX,
            seed_email=settings.SEED_EMAIL,
            seed_password=settings.SEED_PASSWORD,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
        )
    elif backend == "memory":
        store = MemoryProfessionalStore(
            seed_email=settings.SEED_EMAIL,
            seed_password=settings.SEED_PASSWORD,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
        )
    else:
        from commander.stores.sql_store import SqlProfessionalStore, build_engine
        store = SqlProfessionalStore(build_engine(
            settings.DATABASE_URL,
            pool_size=settings.POOL_SIZE,
            max_overflow=settings.MAX_OVERFLOW,
            pool_recycle=settings.POOL_RECYCLE,
        ))
    logger.info("Persistence backend selected: %s", backend, extra={"backend": backend})
    return store


__all__ = ["ProfessionalStore", "MemoryProfessionalStore", "create_store"]
