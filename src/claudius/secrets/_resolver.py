"""Turn ``CLAUDIUS_SECRET_*`` variables into plain environment entries.

resolve_env_vars() runs four phases in order: collect the prefixed variables,
substitute ``op://`` references through the secret store, expand references
between the variables, and strip the prefix.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

from ..errors import SecretResolutionError
from ..models.app_config import SecretManagerType
from ._expansion import SECRET_PREFIX, expand_variables, strip_prefix
from ._metrics import SecretResolutionMetrics
from ._references import OP_SCHEME, substitute_references
from ._store import default_secret_store

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping

    from ..models.app_config import SecretManagerConfig
    from ._store import SecretStore

logger = logging.getLogger(__name__)

PROFILE_ENV = "CLAUDIUS_PROFILE"


class SecretResolver:
    """Resolves the prefixed variables of one environment snapshot.

    Every distinct reference reaches the store at most once per resolver;
    a failed lookup is remembered as well and the reference text stays as it was.
    """

    def __init__(
        self,
        config: SecretManagerConfig | None = None,
        store: SecretStore | None = None,
        max_workers: int = 8,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.config = config
        self._store = store
        self._max_workers = max_workers
        self._environ = environ
        self._cache: dict[str, Future[str | None]] = {}
        self._lock = threading.Lock()
        self.metrics = SecretResolutionMetrics()

    @property
    def store(self) -> SecretStore:
        if self._store is None:
            self._store = default_secret_store()
        return self._store

    def resolve_env_vars(self) -> dict[str, str]:
        """Return public name -> resolved value for every prefixed variable.

        Raises CircularDependencyError when the variables refer to each other
        in a cycle.
        """
        started = time.perf_counter()
        collected = self.collect()
        self.metrics.total_secrets = len(collected)
        logger.debug("Collected %d secret variable(s)", len(collected))

        resolved = self.resolve_references(collected)
        expanded = expand_variables(resolved)
        result = strip_prefix(expanded)

        self.metrics.total_duration = time.perf_counter() - started
        if PROFILE_ENV in os.environ:
            self.metrics.log_summary()
        return result

    def collect(self) -> dict[str, str]:
        environ = os.environ if self._environ is None else self._environ
        return {k: v for k, v in environ.items() if k.startswith(SECRET_PREFIX)}

    def resolve_references(self, variables: Mapping[str, str]) -> dict[str, str]:
        """Substitute secret-store references in each value, in parallel."""
        if self.config is None:
            return dict(variables)
        if self.config.manager_type is SecretManagerType.VAULT:
            for name in variables:
                logger.warning("Vault secret manager is not supported yet; leaving %s unchanged", name)
            return dict(variables)

        pending = {name: value for name, value in variables.items() if OP_SCHEME in value}
        result = dict(variables)
        if not pending:
            return result
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(pending))) as pool:
            futures = {
                name: pool.submit(substitute_references, value, self.lookup)
                for name, value in pending.items()
            }
            for name, future in futures.items():
                result[name] = future.result()
        return result

    def lookup(self, reference: str) -> str | None:
        """Resolve ``reference`` once; later callers wait for and share the result."""
        with self._lock:
            future = self._cache.get(reference)
            owner = future is None
            if owner:
                future = self._cache[reference] = Future()
        if not owner:
            return future.result()

        started = time.perf_counter()
        try:
            value: str | None = self.store.read(reference)
        except SecretResolutionError as e:
            logger.warning("Failed to resolve %s: %s", reference, e)
            value = None
        except Exception as e:
            future.set_exception(e)
            raise
        duration = time.perf_counter() - started
        with self._lock:
            self.metrics.add_op_call(reference, duration, value is not None)
        future.set_result(value)
        return value


def inject_env_vars(
    variables: Mapping[str, str], environ: MutableMapping[str, str] | None = None
) -> None:
    """Set each entry in ``environ`` (the process environment by default)."""
    target = os.environ if environ is None else environ
    for name, value in variables.items():
        target[name] = value
