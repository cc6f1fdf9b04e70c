import asyncio
import json

import click
from graphql.pyutils import is_awaitable

from ..execute import graphql
from ..printer import print_schema, print_type
from ..schema import Schema
from ..utils import import_string


@click.group()
@click.option('-s', '--schema', required=True, help='schema to load, as module:attribute')
@click.pass_context
def main(ctx, schema: str):
    ctx.ensure_object(dict)

    try:
        loaded = import_string(schema)
    except ImportError as exc:
        raise click.BadParameter(str(exc), param_hint='--schema')
    if not isinstance(loaded, Schema):
        raise click.BadParameter(f"'{schema}' is not a Schema.", param_hint='--schema')
    ctx.obj['schema'] = loaded


@main.command()
@click.pass_context
@click.argument('type_name', required=False)
def sdl(ctx, type_name: str):
    """Print the schema, or one type, as SDL"""
    schema = ctx.obj['schema']
    if not type_name:
        click.echo(print_schema(schema), nl=False)
        return

    type_ = schema.get_type(type_name)
    if not type_:
        click.echo(f"No '{type_name}' type.", err=True)
        ctx.exit(1)
    click.echo(print_type(type_))


@main.command()
@click.pass_context
@click.option('--variables', help='variable values as a JSON object')
@click.option('--operation', help='name of the operation to execute')
@click.argument('source')
def query(ctx, source: str, variables: str, operation: str):
    """Execute a query and print the JSON result"""
    variable_values = None
    if variables:
        try:
            variable_values = json.loads(variables)
        except ValueError as exc:
            raise click.BadParameter(f'invalid JSON: {exc}', param_hint='--variables')
        if not isinstance(variable_values, dict):
            raise click.BadParameter('must be a JSON object', param_hint='--variables')

    result = graphql(ctx.obj['schema'], source, variable_values=variable_values, operation_name=operation)
    if is_awaitable(result):
        result = asyncio.run(result)

    click.echo(json.dumps(result.formatted, indent=2))
    if result.errors:
        ctx.exit(1)
