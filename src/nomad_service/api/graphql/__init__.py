"""GraphQL API."""

from nomad_service.api.graphql.context import NomadContext
from nomad_service.api.graphql.schema import create_schema, register, schema
from nomad_service.api.graphql.resolvers import Query, Mutation

__all__ = [
    "schema",
    "create_schema",
    "register",
    "NomadContext",
    "Query",
    "Mutation",
]
