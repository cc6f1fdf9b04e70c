import pytest
from graphql import GraphQLSyntaxError
from graphql.pyutils import Undefined

from gqlengine import (
    InvalidSelectionError,
    Operation,
    Selection,
    UnknownFieldError,
    UnknownTypeError,
    Variable,
    parse_operation,
)


def test_simple_query(schema):
    operation = parse_operation(schema, '{ droid(id: "2000") { name primaryFunction } }')
    assert operation == Operation(
        'query',
        [
            Selection(
                'droid',
                arguments={'id': '2000'},
                selections=[
                    Selection('name', parent_type='Droid'),
                    Selection('primaryFunction', parent_type='Droid'),
                ],
                parent_type='Query',
            )
        ],
    )


def test_alias_and_literals(schema):
    operation = parse_operation(schema, 'query Hero { best: hero(episode: JEDI) { __typename } }')
    assert operation.name == 'Hero'
    hero = operation.selections[0]
    assert hero.alias == 'best'
    assert hero.response_key == 'best'
    assert hero.arguments == {'episode': 'JEDI'}
    assert hero.selections == [Selection('__typename', parent_type='Character')]


def test_inline_fragment(schema):
    query = """
query {
    hero {
        __typename
        ... on Character {
            name
        }
        ... on Human {
            homePlanet
        }
        ... on Droid {
            primaryFunction
        }
    }
}
    """
    hero = parse_operation(schema, query).selections[0]
    assert [(selection.field_name, selection.parent_type) for selection in hero.selections] == [
        ('__typename', 'Character'),
        ('name', 'Character'),
        ('homePlanet', 'Human'),
        ('primaryFunction', 'Droid'),
    ]


def test_named_fragments(schema):
    query = """
query {
    characters { ...HumanName ...DroidName }
}
fragment HumanName on Human { name }
fragment DroidName on Droid { name ...Function }
fragment Function on Droid { primaryFunction }
    """
    characters = parse_operation(schema, query).selections[0]
    assert [(selection.field_name, selection.parent_type) for selection in characters.selections] == [
        ('name', 'Human'),
        ('name', 'Droid'),
        ('primaryFunction', 'Droid'),
    ]


def test_variables(schema):
    query = 'query ($id: String!, $episode: Episode = EMPIRE) { human(id: $id) { name } hero(episode: $episode) { name } }'
    human, hero = parse_operation(schema, query).selections
    assert human.arguments == {'id': Variable('id', Undefined)}
    assert hero.arguments == {'episode': Variable('episode', 'EMPIRE')}


def test_operation_name(schema):
    query = 'query Luke { human(id: "1000") { name } } query Leia { human(id: "1003") { name } }'
    assert parse_operation(schema, query, 'Leia').selections[0].arguments == {'id': '1003'}
    with pytest.raises(InvalidSelectionError, match='Must provide operation name'):
        parse_operation(schema, query)
    with pytest.raises(InvalidSelectionError, match="Unknown operation named 'Han'"):
        parse_operation(schema, query, 'Han')


@pytest.mark.parametrize(
    'query, error',
    [
        ('{ hero { height } }', UnknownFieldError),
        ('{ characters { name } }', UnknownFieldError),
        ('{ hero { name { first } } }', InvalidSelectionError),
        ('{ hero }', InvalidSelectionError),
        ('{ hero { ... on Starship { name } } }', UnknownTypeError),
        ('{ hero { ... on Episode { name } } }', InvalidSelectionError),
        ('{ human(id: "1000") { ... on Droid { name } } }', InvalidSelectionError),
        ('{ hero { ...Missing } }', InvalidSelectionError),
        ('{ hero { ...A } } fragment A on Character { ...B } fragment B on Character { ...A }', InvalidSelectionError),
        ('fragment A on Character { name }', InvalidSelectionError),
    ],
)
def test_binding_errors(schema, query, error):
    with pytest.raises(error):
        parse_operation(schema, query)


def test_syntax_error(schema):
    with pytest.raises(GraphQLSyntaxError):
        parse_operation(schema, '{ hero ')
