"""Dependency injection containers for the credential hygiene engine."""

from __future__ import annotations

import psycopg2.pool
import requests
from dependency_injector import containers, providers
from verboselogs import VerboseLogger

from credential_hygiene.analysis.domain import DomainNormalizer
from credential_hygiene.analysis.grouper import CredentialGrouper
from credential_hygiene.config import Settings
from credential_hygiene.database.dao.credential import CredentialsDAO
from credential_hygiene.helpers import init_logger
from credential_hygiene.services.breach_oracle import BreachOracle
from credential_hygiene.services.cleanup_executor import CleanupExecutor
from credential_hygiene.services.health_auditor import HealthAuditor


class DatabaseContainer(containers.DeclarativeContainer):
    """Container for database-related components."""

    config = providers.Dependency(instance_of=Settings)
    logger = providers.Dependency(instance_of=VerboseLogger)

    db_pool = providers.Singleton(
        psycopg2.pool.SimpleConnectionPool,
        minconn=1,
        maxconn=5,
        host=config.provided.db_host,
        port=config.provided.db_port,
        dbname=config.provided.db_name,
        user=config.provided.db_user,
        password=config.provided.db_password,
    )

    credentials_dao = providers.Factory(CredentialsDAO, db_pool=db_pool, logger=logger)


class ServicesContainer(containers.DeclarativeContainer):
    """Container for the analysis and orchestration services."""

    config = providers.Dependency(instance_of=Settings)
    logger = providers.Dependency(instance_of=VerboseLogger)

    # Connection pooling only; results are never kept on the session.
    http_session = providers.Singleton(requests.Session)

    domain_normalizer = providers.Singleton(
        DomainNormalizer,
        subdomain_prefixes=config.provided.subdomain_prefixes,
    )

    grouper = providers.Factory(
        CredentialGrouper,
        normalizer=domain_normalizer,
        strong_entropy_threshold=config.provided.strong_entropy_threshold,
        logger=logger,
    )

    breach_oracle = providers.Factory(
        BreachOracle,
        session=http_session,
        endpoint=config.provided.breach_api_url,
        timeout=config.provided.breach_timeout,
        user_agent=config.provided.breach_user_agent,
        add_padding=config.provided.breach_add_padding,
        logger=logger,
    )

    health_auditor = providers.Factory(
        HealthAuditor,
        oracle=breach_oracle,
        grouper=grouper,
        weak_threshold=config.provided.weak_entropy_threshold,
        reuse_threshold=config.provided.strong_entropy_threshold,
        logger=logger,
    )

    cleanup_executor = providers.Factory(
        CleanupExecutor,
        grouper=grouper,
        logger=logger,
    )


class AppContainer(containers.DeclarativeContainer):
    """Main application container."""

    config = providers.Singleton(Settings)
    logger = providers.Singleton(init_logger, "credential_hygiene", "INFO")

    database = providers.Container(
        DatabaseContainer,
        config=config,
        logger=logger,
    )

    services = providers.Container(
        ServicesContainer,
        config=config,
        logger=logger,
    )
