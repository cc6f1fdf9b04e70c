from functools import partial, reduce
from inspect import isfunction
from typing import Any, Callable, Dict, Iterator, List, Optional

from graphql.execution.middleware import MiddlewareManager as BaseMiddlewareManager

FieldResolver = Callable[..., Any]


class MiddlewareManager(BaseMiddlewareManager):
    """Resolver middleware.

    Positional middlewares wrap every resolver. ``by_type`` maps a parent type name,
    or ``'Type.field'``, to middlewares applied only there. Fields listed in
    ``exclude`` are left untouched. A middleware is called as
    ``middleware(next, source, info, **args)``.
    """

    by_type: Dict[str, List[Callable]]
    exclude: List[str]

    def __init__(
        self,
        *middlewares: Any,
        by_type: Optional[Dict[str, list]] = None,
        exclude: Optional[List[str]] = None,
    ):
        super().__init__(*middlewares)
        by_type = by_type or {}
        assert isinstance(by_type, dict), f'MiddlewareManager expected dict, not {type(by_type)}'
        self.by_type = {key: list(get_middleware_resolvers(value)) for key, value in by_type.items() if value}
        self.exclude = exclude or []
        self._cached_type_resolvers: Dict[Any, FieldResolver] = {}

    def get_field_resolver_by_parent(
        self, field_resolver: FieldResolver, parent_type: str, field_name: str
    ) -> FieldResolver:
        field = f'{parent_type}.{field_name}'
        if field in self.exclude:
            return field_resolver

        key = field if field in self.by_type else parent_type
        middlewares = self.by_type.get(key)
        if middlewares:
            cache_key = (field_resolver, key)
            if cache_key not in self._cached_type_resolvers:
                self._cached_type_resolvers[cache_key] = reduce(
                    lambda chained_fns, next_fn: partial(next_fn, chained_fns),
                    middlewares,
                    field_resolver,
                )
            field_resolver = self._cached_type_resolvers[cache_key]

        return self.get_field_resolver(field_resolver)


def get_middleware_resolvers(middlewares: list) -> Iterator[Callable]:
    """Get a list of resolver functions from a list of classes or functions."""
    for middleware in middlewares:
        if isfunction(middleware):
            yield middleware
        else:  # middleware provided as object with 'resolve' method
            resolver_func = getattr(middleware, "resolve", None)
            if resolver_func is not None:
                yield resolver_func
