"""Relational schema helpers for a Protean domain.

Only SQL providers (sqlite, postgresql) have a schema; the memory provider
used in tests and local runs needs none.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    return [provider for provider in domain.providers.values() if provider.conn_info["provider"] in _SQL_PROVIDERS]


def setup_db(domain: Domain) -> list[str]:
    """Create the tables of every aggregate, entity and outbox; returns provider names touched."""
    touched = []
    with domain.domain_context():
        for provider in _sql_providers(domain):
            # Building a DAO registers its table on the provider's metadata
            for registry in (domain.registry.aggregates, domain.registry.entities):
                for record in registry.values():
                    if record.cls.meta_.provider == provider.name:
                        domain.repository_for(record.cls)._dao  # noqa: B018

            if hasattr(domain, "_outbox_repos") and provider.name in domain._outbox_repos:
                domain._outbox_repos[provider.name]._dao  # noqa: B018

            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))
            touched.append(provider.name)
    return touched


def drop_db(domain: Domain) -> list[str]:
    touched = []
    with domain.domain_context():
        for provider in _sql_providers(domain):
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
            touched.append(provider.name)
    return touched
