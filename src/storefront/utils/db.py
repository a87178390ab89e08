from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _register_models(domain: Domain, provider_name: str) -> None:
    """Touch each repository's DAO so its SQLAlchemy model joins the provider metadata."""
    for _, aggregate_record in domain.registry.aggregates.items():
        if aggregate_record.cls.meta_.provider == provider_name:
            domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

    for _, entity_record in domain.registry.entities.items():
        if entity_record.cls.meta_.provider == provider_name:
            domain.repository_for(entity_record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create database tables for every SQL provider of the domain."""
    with domain.domain_context():
        for name, provider in domain.providers.items():
            if provider.conn_info["provider"] in _SQL_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                _register_models(domain, name)
                provider._metadata.create_all(engine)


def drop_db(domain: Domain) -> None:
    """Drop database tables for every SQL provider of the domain."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in _SQL_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                provider._metadata.drop_all(engine)
