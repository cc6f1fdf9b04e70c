"""The Star Wars schema, in type system shorthand::

    enum Episode { NEWHOPE, EMPIRE, JEDI }

    enum HumanRank { PRIVATE, CAPTAIN, MAJOR }
    enum DroidRank { BASIC, ADVANCED, SUPERIOR }

    interface Character {
      id: String!
      name: String
      friends: [Character]
      appearsIn: [Episode]
      secretBackstory: String
    }

    type Human implements Character {
      ...
      homePlanet: String
      rank: HumanRank
      rankObject: HumanRankObject
    }

    type Droid implements Character {
      ...
      primaryFunction: String
      rank: DroidRank
      rankObject: DroidRankObject
    }

    union CharacterUnion = Human | Droid

    type Query {
      hero(episode: Episode): Character
      human(id: String!): Human
      droid(id: String!): Droid
      characters: [CharacterUnion]
    }
"""
from gqlengine import (
    GraphQLArgument,
    GraphQLEnumType,
    GraphQLEnumValue,
    GraphQLField,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLString,
    GraphQLUnionType,
    Schema,
)

from starwars_data import get_droid, get_friends, get_hero, get_human

episode_enum = GraphQLEnumType(
    'Episode',
    {
        'NEWHOPE': GraphQLEnumValue(4, description='Released in 1977.'),
        'EMPIRE': GraphQLEnumValue(5, description='Released in 1980.'),
        'JEDI': GraphQLEnumValue(6, description='Released in 1983.'),
    },
    description='One of the films in the Star Wars Trilogy',
)

human_rank_enum = GraphQLEnumType('HumanRank', {'PRIVATE': 'PRIVATE', 'CAPTAIN': 'CAPTAIN', 'MAJOR': 'MAJOR'})

droid_rank_enum = GraphQLEnumType('DroidRank', {'BASIC': 'BASIC', 'ADVANCED': 'ADVANCED', 'SUPERIOR': 'SUPERIOR'})

human_rank_object_type = GraphQLObjectType('HumanRankObject', {'name': GraphQLField(GraphQLNonNull(GraphQLString))})

droid_rank_object_type = GraphQLObjectType('DroidRankObject', {'name': GraphQLField(GraphQLNonNull(GraphQLString))})


def resolve_character_type(character, info, abstract_type):
    return human_type if character['type'] == 'Human' else droid_type


def secret_backstory(character, info):
    raise RuntimeError('secretBackstory is secret.')


character_interface = GraphQLInterfaceType(
    'Character',
    lambda: {
        'id': GraphQLField(GraphQLNonNull(GraphQLString), description='The id of the character.'),
        'name': GraphQLField(GraphQLString, description='The name of the character.'),
        'friends': GraphQLField(
            GraphQLList(character_interface),
            description='The friends of the character, or an empty list if they have none.',
        ),
        'appearsIn': GraphQLField(GraphQLList(episode_enum), description='Which movies they appear in.'),
        'secretBackstory': GraphQLField(
            GraphQLString, description='All secrets about their past.'
        ),
    },
    resolve_type=resolve_character_type,
    description='A character in the Star Wars Trilogy',
)

human_type = GraphQLObjectType(
    'Human',
    lambda: {
        'id': GraphQLField(GraphQLNonNull(GraphQLString), description='The id of the human.'),
        'name': GraphQLField(GraphQLString, description='The name of the human.'),
        'friends': GraphQLField(
            GraphQLList(character_interface),
            resolve=lambda human, info: get_friends(human),
            description='The friends of the human, or an empty list if they have none.',
        ),
        'appearsIn': GraphQLField(GraphQLList(episode_enum), description='Which movies they appear in.'),
        'homePlanet': GraphQLField(GraphQLString, description='The home planet of the human, or null if unknown.'),
        'rank': GraphQLField(human_rank_enum, resolve=lambda human, info: 'PRIVATE'),
        'rankObject': GraphQLField(human_rank_object_type, resolve=lambda human, info: {'name': 'FOO'}),
        'secretBackstory': GraphQLField(
            GraphQLString,
            resolve=secret_backstory,
            description='Where are they from and how they came to be who they are.',
        ),
    },
    interfaces=[character_interface],
    description='A humanoid creature in the Star Wars universe.',
)

droid_type = GraphQLObjectType(
    'Droid',
    lambda: {
        'id': GraphQLField(GraphQLNonNull(GraphQLString), description='The id of the droid.'),
        'name': GraphQLField(GraphQLString, description='The name of the droid.'),
        'friends': GraphQLField(
            GraphQLList(character_interface),
            resolve=lambda droid, info: get_friends(droid),
            description='The friends of the droid, or an empty list if they have none.',
        ),
        'appearsIn': GraphQLField(GraphQLList(episode_enum), description='Which movies they appear in.'),
        'rank': GraphQLField(droid_rank_enum, resolve=lambda droid, info: 'BASIC'),
        'rankObject': GraphQLField(droid_rank_object_type, resolve=lambda droid, info: {'name': 'BAR'}),
        'secretBackstory': GraphQLField(
            GraphQLString,
            resolve=secret_backstory,
            description='Construction date and the name of the designer.',
        ),
        'primaryFunction': GraphQLField(GraphQLString, description='The primary function of the droid.'),
    },
    interfaces=[character_interface],
    description='A mechanical creature in the Star Wars universe.',
)


def resolve_character_union_type(data, info, abstract_type):
    if data['type'] == 'Human':
        return human_type
    if data['type'] == 'Droid':
        return droid_type
    return None


character_union = GraphQLUnionType('CharacterUnion', [human_type, droid_type], resolve_type=resolve_character_union_type)

query_type = GraphQLObjectType(
    'Query',
    lambda: {
        'hero': GraphQLField(
            character_interface,
            args={
                'episode': GraphQLArgument(
                    episode_enum,
                    description='If omitted, returns the hero of the whole saga.'
                    ' If provided, returns the hero of that particular episode.',
                )
            },
            resolve=lambda root, info, episode=None: get_hero(episode),
        ),
        'human': GraphQLField(
            human_type,
            args={'id': GraphQLArgument(GraphQLNonNull(GraphQLString), description='id of the human')},
            resolve=lambda root, info, id: get_human(id),
        ),
        'droid': GraphQLField(
            droid_type,
            args={'id': GraphQLArgument(GraphQLNonNull(GraphQLString), description='id of the droid')},
            resolve=lambda root, info, id: get_droid(id),
        ),
        'characters': GraphQLField(
            GraphQLList(character_union),
            resolve=lambda root, info: [get_droid('2000'), get_human('1000')],
        ),
    },
)

star_wars_schema = Schema(query_type, types=[human_type, droid_type])
