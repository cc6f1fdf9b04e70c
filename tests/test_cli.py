import json

from click.testing import CliRunner

from gqlengine.cli.main import main

SCHEMA = 'starwars_schema:star_wars_schema'


class TestSdl:
    def test_whole_schema(self):
        result = CliRunner().invoke(main, ['--schema', SCHEMA, 'sdl'])
        assert result.exit_code == 0
        assert 'union CharacterUnion = Human | Droid' in result.output
        assert result.output.rstrip().endswith('}')

    def test_one_type(self):
        result = CliRunner().invoke(main, ['-s', SCHEMA, 'sdl', 'Droid'])
        assert result.exit_code == 0
        assert result.output.startswith('"A mechanical creature in the Star Wars universe."\ntype Droid implements Character {\n')
        assert '  primaryFunction: String\n' in result.output

    def test_unknown_type(self):
        result = CliRunner().invoke(main, ['-s', SCHEMA, 'sdl', 'Starship'])
        assert result.exit_code == 1
        assert "No 'Starship' type." in result.output

    def test_bad_schema_path(self):
        result = CliRunner().invoke(main, ['-s', 'starwars_schema:missing', 'sdl'])
        assert result.exit_code == 2
        assert "has no attribute 'missing'" in result.output

    def test_not_a_schema(self):
        result = CliRunner().invoke(main, ['-s', 'starwars_schema:human_type', 'sdl'])
        assert result.exit_code == 2


class TestQuery:
    def test_query(self):
        result = CliRunner().invoke(main, ['-s', SCHEMA, 'query', '{ droid(id: "2000") { name primaryFunction } }'])
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            'data': {'droid': {'name': 'C-3PO', 'primaryFunction': 'Protocol'}},
            'errors': [],
        }

    def test_variables_and_operation(self):
        source = 'query A { hero { name } } query B($episode: Episode) { hero(episode: $episode) { name } }'
        result = CliRunner().invoke(
            main, ['-s', SCHEMA, 'query', source, '--operation', 'B', '--variables', '{"episode": "EMPIRE"}']
        )
        assert result.exit_code == 0
        assert json.loads(result.output)['data'] == {'hero': {'name': 'Luke Skywalker'}}

    def test_field_errors(self):
        result = CliRunner().invoke(main, ['-s', SCHEMA, 'query', '{ droid(id: "2000") { secretBackstory } }'])
        assert result.exit_code == 1
        assert json.loads(result.output)['errors'] == [
            {'message': 'secretBackstory is secret.', 'path': ['droid', 'secretBackstory'], 'errorKind': 'RESOLVER_ERROR'}
        ]

    def test_invalid_variables(self):
        result = CliRunner().invoke(main, ['-s', SCHEMA, 'query', '{ hero { name } }', '--variables', '[1]'])
        assert result.exit_code == 2
