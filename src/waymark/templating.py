"""Kida template helpers for endpoint links.

``register_router`` makes a router available to templates::

    register_router(env, router)

    <a{{ page | href }}>Read more</a>      → <a href="article/42">Read more</a>
    <form action="{{ link(page) }}">       → <form action="article/42">
"""

import html
from typing import Any

from kida import Environment
from kida.utils.html import Markup

from waymark.router import EndpointRouter


def href(router: EndpointRouter[Any, Any, Any], endpoint: Any) -> Markup:
    """Render `` href="<path>"`` for *endpoint*, escaped for HTML."""
    return Markup(f' href="{html.escape(router.link(endpoint))}"')


def register_router(env: Environment, router: EndpointRouter[Any, Any, Any]) -> None:
    """Install the ``href`` filter and ``link`` global for *router* on *env*."""

    def href_filter(endpoint: Any) -> Markup:
        return href(router, endpoint)

    env.update_filters({"href": href_filter})
    env.add_global("link", router.link)
