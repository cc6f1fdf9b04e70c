from gqlengine import MiddlewareManager, graphql_sync


def upper(next_, source, info, **args):
    value = next_(source, info, **args)
    return value.upper() if isinstance(value, str) else value


def suffix(next_, source, info, **args):
    value = next_(source, info, **args)
    return f'{value}!' if isinstance(value, str) else value


class Reverse:
    def resolve(self, next_, source, info, **args):
        value = next_(source, info, **args)
        return value[::-1] if isinstance(value, str) else value


QUERY = '{ hero { name } droid(id: "2000") { name primaryFunction } }'


def test_list_of_middlewares(schema):
    result = graphql_sync(schema, '{ hero { name } }', middleware=[upper, suffix])
    assert result == ({'hero': {'name': 'R2-D2!'}}, [])


def test_middleware_object(schema):
    result = graphql_sync(schema, '{ hero { name } }', middleware=MiddlewareManager(Reverse()))
    assert result == ({'hero': {'name': '2D-2R'}}, [])


def test_by_type(schema):
    middleware = MiddlewareManager(by_type={'Droid': [upper]})
    result = graphql_sync(schema, QUERY, middleware=middleware)
    assert result == ({'hero': {'name': 'R2-D2'}, 'droid': {'name': 'C-3PO', 'primaryFunction': 'PROTOCOL'}}, [])


def test_by_field(schema):
    middleware = MiddlewareManager(by_type={'Droid.primaryFunction': [upper], 'Droid': [suffix]})
    result = graphql_sync(schema, QUERY, middleware=middleware)
    assert result == ({'hero': {'name': 'R2-D2!'}, 'droid': {'name': 'C-3PO!', 'primaryFunction': 'PROTOCOL'}}, [])


def test_exclude(schema):
    middleware = MiddlewareManager(upper, exclude=['Droid.name'])
    result = graphql_sync(schema, QUERY, middleware=middleware)
    assert result == ({'hero': {'name': 'R2-D2'}, 'droid': {'name': 'C-3PO', 'primaryFunction': 'PROTOCOL'}}, [])
