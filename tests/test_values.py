import pytest

from gqlengine import (
    GraphQLArgument,
    GraphQLField,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLString,
    InvalidArgumentValueError,
    MissingRequiredArgumentError,
    NullArgumentError,
    Schema,
    UnknownArgumentError,
    UnknownEnumValueError,
    Variable,
    graphql_sync,
)
from gqlengine.values import coerce_argument_values

from starwars_schema import episode_enum

field = GraphQLField(
    GraphQLString,
    args={
        'id': GraphQLNonNull(GraphQLString),
        'episode': episode_enum,
        'episodes': GraphQLList(GraphQLNonNull(episode_enum)),
        'limit': GraphQLArgument(GraphQLInt, default_value=10),
    },
)


def coerce(arguments, variable_values=None):
    return coerce_argument_values('Query.field', field, arguments, variable_values)


class TestCoerceArgumentValues:
    def test_literals(self):
        assert coerce({'id': '1', 'episode': 'JEDI', 'limit': 3}) == {'id': '1', 'episode': 6, 'limit': 3}

    def test_defaults(self):
        assert coerce({'id': '1'}) == {'id': '1', 'limit': 10}

    def test_explicit_null(self):
        assert coerce({'id': '1', 'episode': None, 'limit': None}) == {'id': '1', 'episode': None, 'limit': None}

    def test_lists(self):
        assert coerce({'id': '1', 'episodes': ['NEWHOPE', 'EMPIRE']})['episodes'] == [4, 5]
        assert coerce({'id': '1', 'episodes': 'JEDI'})['episodes'] == [6]

    def test_missing_required(self):
        with pytest.raises(MissingRequiredArgumentError) as excinfo:
            coerce({})
        assert excinfo.value.message == "Argument 'id' of required type 'String!' was not provided on field 'Query.field'."

    def test_null_for_non_null(self):
        with pytest.raises(NullArgumentError):
            coerce({'id': None})
        with pytest.raises(NullArgumentError):
            coerce({'id': '1', 'episodes': ['JEDI', None]})

    def test_unknown_argument(self):
        with pytest.raises(UnknownArgumentError) as excinfo:
            coerce({'id': '1', 'name': 'Luke'})
        assert excinfo.value.extensions == {'code': 'UNKNOWN_ARGUMENT', 'exception': {'argument': 'name'}}

    def test_unknown_enum_value(self):
        with pytest.raises(UnknownEnumValueError):
            coerce({'id': '1', 'episode': 'SITH'})

    def test_invalid_scalar(self):
        with pytest.raises(InvalidArgumentValueError) as excinfo:
            coerce({'id': '1', 'limit': 'ten'})
        assert isinstance(excinfo.value.original_error, TypeError)


class TestVariables:
    def test_variable_value(self):
        assert coerce({'id': Variable('id')}, {'id': '1000'}) == {'id': '1000', 'limit': 10}

    def test_variable_default(self):
        assert coerce({'id': '1', 'limit': Variable('limit', 5)}) == {'id': '1', 'limit': 5}

    def test_missing_variable_is_omitted(self):
        assert coerce({'id': '1', 'limit': Variable('limit')}) == {'id': '1', 'limit': 10}
        with pytest.raises(MissingRequiredArgumentError):
            coerce({'id': Variable('id')})

    def test_variable_in_list(self):
        result = coerce({'id': '1', 'episodes': ['NEWHOPE', Variable('episode')]}, {'episode': 'JEDI'})
        assert result['episodes'] == [4, 6]


class TestFieldArguments:
    def test_literal_too_large_for_int(self):
        schema = Schema(
            GraphQLObjectType(
                'Query',
                {'double': GraphQLField(GraphQLInt, args={'n': GraphQLInt}, resolve=lambda root, info, n: n * 2)},
            )
        )
        result = graphql_sync(schema, '{ double(n: 1e400) }')
        assert result.data == {'double': None}
        assert result.formatted['errors'][0]['errorKind'] == 'INVALID_ARGUMENT_VALUE'
