"""base.py — The one place a facade decides between live and mock.

Every public facade method builds a ``live`` and a ``mock`` strategy and
hands both to ``DataService._dispatch``. Dispatch resolves the mode exactly
once, before either strategy runs, so a toggle mid-call cannot split a write
across backends.

Failure mapping:
    live strategy → DataServiceError propagates, anything else → RemoteFailure
    mock strategy → DataServiceError propagates, anything else → LocalStateFailure

Called by: services/products.py, sales.py, settings.py, archived.py
Depends on: core/mode_store.py, core/protocols.py, mock/provider.py
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from medcure.core.environment import Mode
from medcure.core.errors import DataServiceError, LocalStateFailure, RemoteFailure
from medcure.core.mode_store import ModeStore
from medcure.core.protocols import BackendClient
from medcure.mock.provider import MockDataProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

LiveStrategy = Callable[[], Awaitable[T]]
MockStrategy = Callable[[], T | Awaitable[T]]


class DataService:
    """Base facade: shared wiring plus the live/mock dispatch."""

    domain = "data"

    def __init__(
        self,
        mode_store: ModeStore,
        backend: BackendClient,
        mock: MockDataProvider,
    ) -> None:
        self._mode_store = mode_store
        self._backend = backend
        self._mock = mock

    async def _dispatch(
        self,
        operation: str,
        *,
        live: LiveStrategy[T],
        mock: MockStrategy[T],
    ) -> T:
        mode = await self._mode_store.current_mode()
        logger.debug("%s.%s dispatched to %s", self.domain, operation, mode.value)

        if mode is Mode.LIVE:
            try:
                return await live()
            except DataServiceError:
                raise
            except Exception as exc:
                logger.warning("%s.%s live call failed: %s", self.domain, operation, exc)
                raise RemoteFailure(f"{operation} failed: {exc}", domain=self.domain) from exc

        try:
            result: Any = mock()
            if inspect.isawaitable(result):
                result = await result
            return result
        except DataServiceError:
            raise
        except Exception as exc:
            logger.warning("%s.%s mock call failed: %s", self.domain, operation, exc)
            raise LocalStateFailure(f"{operation} failed: {exc}", domain=self.domain) from exc
