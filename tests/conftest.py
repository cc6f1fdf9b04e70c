import pytest

from gqlengine import GraphQLField, GraphQLList, GraphQLNonNull, GraphQLObjectType, GraphQLString, Schema
from gqlengine.resolver import field_resolver_map, type_resolver_map

from starwars_schema import star_wars_schema


@pytest.fixture
def schema():
    return star_wars_schema


@pytest.fixture
def hello_schema():
    """Query { hello: String, names: [String!]!, greet(name: String!): String }"""
    return Schema(
        GraphQLObjectType(
            'Query',
            {
                'hello': GraphQLString,
                'names': GraphQLNonNull(GraphQLList(GraphQLNonNull(GraphQLString))),
                'greet': GraphQLField(
                    GraphQLString,
                    args={'name': GraphQLNonNull(GraphQLString)},
                    resolve=lambda root, info, name: f'Hello, {name}!',
                ),
            },
        )
    )


@pytest.fixture
def clean_resolver_maps():
    field_resolvers = {key: dict(value) for key, value in field_resolver_map.items()}
    type_resolvers = dict(type_resolver_map)
    yield
    field_resolver_map.clear()
    field_resolver_map.update(field_resolvers)
    type_resolver_map.clear()
    type_resolver_map.update(type_resolvers)
