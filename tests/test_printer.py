from gqlengine import (
    GraphQLArgument,
    GraphQLEnumType,
    GraphQLEnumValue,
    GraphQLField,
    GraphQLID,
    GraphQLInt,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLString,
    GraphQLUnionType,
    Schema,
    print_schema,
    print_type,
)


def test_print_schema():
    node = GraphQLInterfaceType('Node', {'id': GraphQLNonNull(GraphQLID)})
    color = GraphQLEnumType(
        'Color',
        {
            'RED': GraphQLEnumValue('red', description='Warm.'),
            'BLUE': GraphQLEnumValue('blue', deprecation_reason='Too cold.'),
        },
    )
    item = GraphQLObjectType(
        'Item',
        {
            'id': GraphQLNonNull(GraphQLID),
            'color': color,
            'old': GraphQLField(GraphQLString, deprecation_reason='Use color.'),
        },
        interfaces=[node],
        description='An item.',
    )
    query = GraphQLObjectType(
        'Query',
        {
            'items': GraphQLField(
                GraphQLList(item),
                args={
                    'color': GraphQLArgument(color, default_value='red'),
                    'first': GraphQLArgument(GraphQLInt, 10),
                    'name': GraphQLArgument(GraphQLString, 'x'),
                },
            ),
            'search': GraphQLField(GraphQLUnionType('Result', [item]), args={'on': GraphQLScalarType('Date')}),
        },
    )
    schema = Schema(query)

    assert print_schema(schema) == '''scalar Date

enum Color {
  "Warm."
  RED
  BLUE @deprecated(reason: "Too cold.")
}

interface Node {
  id: ID!
}

"An item."
type Item implements Node {
  id: ID!
  color: Color
  old: String @deprecated(reason: "Use color.")
}

union Result = Item

type Query {
  items(color: Color = RED, first: Int = 10, name: String = "x"): [Item]
  search(on: Date): Result
}
'''
    assert str(schema) == print_schema(schema)


def test_block_description():
    type_ = GraphQLObjectType('Long', {'name': GraphQLString}, description='First line.\nSecond line.')
    assert print_type(type_) == '"""\nFirst line.\nSecond line.\n"""\ntype Long {\n  name: String\n}'


def test_star_wars_types(schema):
    assert print_type(schema.get_type('CharacterUnion')) == 'union CharacterUnion = Human | Droid'
    assert print_type(schema.get_type('HumanRank')) == 'enum HumanRank {\n  PRIVATE\n  CAPTAIN\n  MAJOR\n}'

    query = print_type(schema.query_type)
    assert '  human(id: String!): Human\n' in query
    assert '  characters: [CharacterUnion]\n' in query
