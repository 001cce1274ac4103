"""Route table execution: turns tool arguments into Smartlead requests."""

from __future__ import annotations

import string
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from ..registry.models import OperationDescriptor
from .client import SmartleadClient
from .models import SmartleadService

BodyBuilder = Callable[[dict[str, Any]], Any]

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass(frozen=True)
class Route:
    """How one operation maps onto the Smartlead REST API.

    Path placeholders (``{campaign_id}``) are filled from the arguments.
    Remaining arguments go to the query string for GET/DELETE and to the JSON
    body for POST/PUT, unless listed in ``query``. ``body`` replaces the
    default body with a function of the remaining arguments; ``delete_body``
    sends the remaining arguments as a JSON body on DELETE.
    """

    method: str
    path: str
    service: SmartleadService = SmartleadService.CORE
    query: tuple[str, ...] = ()
    body: BodyBuilder | None = None
    delete_body: bool = False
    defaults: Mapping[str, Any] = field(default_factory=dict)

    @property
    def path_params(self) -> list[str]:
        return [name for _, name, _, _ in string.Formatter().parse(self.path) if name]

    def render(self, arguments: Mapping[str, Any]) -> tuple[str, dict[str, Any], Any]:
        """Split arguments into (path, query params, JSON body).

        Raises:
            KeyError: If a path placeholder has no argument
        """
        values = {**self.defaults, **{k: v for k, v in arguments.items() if v is not None}}

        path_values = {}
        for name in self.path_params:
            if name not in values:
                raise KeyError(name)
            value = values.pop(name)
            # 12.0 -> "12"
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            path_values[name] = quote(str(value), safe="")
        path = self.path.format(**path_values)

        params = {name: values.pop(name) for name in self.query if name in values}

        method = self.method.upper()
        sends_body = method in _BODY_METHODS or (method == "DELETE" and self.delete_body)
        if self.body is not None:
            return path, params, self.body(values)
        if sends_body:
            return path, params, values
        params.update(values)
        return path, params, None


class SmartleadAdapter:
    """Upstream call adapter for every Smartlead category."""

    def __init__(self, client: SmartleadClient, routes: Mapping[str, Route]):
        self.client = client
        self.routes = dict(routes)

    async def call(
        self,
        descriptor: OperationDescriptor,
        arguments: Mapping[str, Any],
        correlation_id: str | None = None,
    ) -> Any:
        """Execute ``descriptor`` against Smartlead.

        Raises:
            LookupError: If no route is registered for the operation
            SmartleadAPIError: If the upstream call fails
        """
        route = self.routes.get(descriptor.name)
        if route is None:
            raise LookupError(f"No Smartlead route for {descriptor.name}")

        try:
            path, params, body = route.render(arguments)
        except KeyError as e:
            raise LookupError(f"Missing path argument {e.args[0]!r}") from e

        return await self.client.request(
            route.method,
            path,
            service=route.service,
            json=body,
            params=params or None,
            correlation_id=correlation_id,
        )

    async def close(self) -> None:
        await self.client.close()
