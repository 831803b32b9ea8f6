"""GraphQL schema definition."""

from typing import Iterable, Optional

import strawberry
from fastapi import FastAPI
from strawberry.fastapi import GraphQLRouter
from strawberry.tools import merge_types

from nomad_service.api.graphql.context import make_context_getter
from nomad_service.api.graphql.resolvers import Query, Mutation
from nomad_service.config import get_settings
from nomad_service.dates import Clock
from nomad_service.repositories import EntityService


def create_schema(
    extra_queries: Iterable[type] = (),
    extra_mutations: Iterable[type] = (),
) -> strawberry.Schema:
    """Schema with the nomad extension merged into any host Query/Mutation types."""
    query = merge_types("Query", (Query, *extra_queries))
    mutation = merge_types("Mutation", (Mutation, *extra_mutations))
    return strawberry.Schema(query=query, mutation=mutation)


# Create schema
schema = create_schema()


def create_graphql_router(
    entities: EntityService,
    clock: Optional[Clock] = None,
    graphql_schema: Optional[strawberry.Schema] = None,
) -> GraphQLRouter:
    """Create router for FastAPI."""
    return GraphQLRouter(
        graphql_schema or schema,
        context_getter=make_context_getter(entities, clock),
    )


def register(
    app: FastAPI,
    entities: EntityService,
    clock: Optional[Clock] = None,
    graphql_schema: Optional[strawberry.Schema] = None,
) -> GraphQLRouter:
    """Mount the GraphQL extension on a FastAPI app."""
    router = create_graphql_router(entities, clock, graphql_schema)
    app.include_router(router, prefix=get_settings().graphql_path)
    return router
