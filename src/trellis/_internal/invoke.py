"""Invoke helpers — call sync or async callbacks uniformly.

Page and widget callbacks, context enrichers, and loaders can be ``def``
or ``async def``. Any code that calls a user-provided callback must handle
both cases. This module provides a single helper so the sync/async check
lives in exactly one place.

Usage::

    from trellis._internal.invoke import invoke

    data = await invoke(page.get_data, params=params, context=context)
"""

import inspect
from typing import Any


async def invoke(callback: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a callback and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync — returns immediately
        class About(PageComponent):
            def get_data(self, params, context):
                return {"team": TEAM}

        # async — returns coroutine, awaited automatically
        class Project(PageComponent):
            async def get_data(self, params, context):
                return await fetch_project(params["id"])
    """
    result = callback(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
