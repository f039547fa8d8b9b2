"""Backends that turn a secret reference into its value."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from typing import Protocol

from ..errors import SecretResolutionError

logger = logging.getLogger(__name__)

MOCK_OP_ENV = "CLAUDIUS_TEST_MOCK_OP"

MOCK_OP_TABLE: dict[str, str] = {
    "op://vault/test-item/api-key": "secret-api-key-12345",
    "op://vault/database/password": "db-password-xyz789",
    "op://Private/CLOUDFLARE_AI_Gateway/Account_ID": "cf-account-12345",
    "op://Private/CLOUDFLARE AI Gateway/Account ID": "cf-account-12345",
    "op://Private/CLOUDFLARE_AI_Gateway/Gateway_ID": "cf-gateway-67890",
    "op://Private/CLOUDFLARE AI Gateway/Gateway ID": "cf-gateway-67890",
    "op://Private/CLOUDFLARE_AI_Gateway/credential": "cf-credential-secret",
    "op://Private/CLOUDFLARE AI Gateway/credential": "cf-credential-secret",
    **{f"op://vault/item{n}/field{n}": f"secret-value-{n}" for n in range(1, 6)},
}

MOCK_OP_FAILURES: dict[str, str] = {
    "op://invalid/reference/field": "ERROR: Item not found",
}


class SecretStore(Protocol):
    """Resolves one reference. Raises SecretResolutionError on failure."""

    def read(self, reference: str) -> str: ...


class OnePasswordCLI:
    """Runs ``op read <reference>``. Availability is checked once with ``op --version``."""

    def __init__(self, executable: str = "op", timeout: float = 60.0) -> None:
        self._executable = executable
        self._timeout = timeout
        self._checked = False
        self._check_lock = threading.Lock()

    def read(self, reference: str) -> str:
        self._ensure_available()
        result = self._run("read", reference)
        if result.returncode != 0:
            raise SecretResolutionError(
                f"1Password CLI failed: {result.stderr.strip()}", reference=reference
            )
        return result.stdout.strip()

    def _ensure_available(self) -> None:
        with self._check_lock:
            if self._checked:
                return
            self._run("--version")
            self._checked = True

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        reference = args[-1] if args[0] == "read" else None
        try:
            return subprocess.run(
                [self._executable, *args],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as e:
            raise SecretResolutionError(
                "1Password CLI (op) is not installed or not in PATH", reference=reference
            ) from e
        except subprocess.TimeoutExpired as e:
            raise SecretResolutionError(
                f"1Password CLI timed out after {self._timeout}s", reference=reference
            ) from e


class MockSecretStore:
    """Fixed lookup table standing in for the 1Password CLI."""

    def __init__(
        self,
        table: dict[str, str] | None = None,
        failures: dict[str, str] | None = None,
    ) -> None:
        self.table = dict(MOCK_OP_TABLE if table is None else table)
        self.failures = dict(MOCK_OP_FAILURES if failures is None else failures)
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def read(self, reference: str) -> str:
        with self._lock:
            self.calls.append(reference)
        if reference in self.table:
            return self.table[reference]
        detail = self.failures.get(reference, "ERROR: Unknown reference")
        raise SecretResolutionError(f"1Password CLI failed: {detail}", reference=reference)


def default_secret_store() -> SecretStore:
    """The mock table when CLAUDIUS_TEST_MOCK_OP is set, otherwise the real CLI."""
    if MOCK_OP_ENV in os.environ:
        logger.debug("Using mock 1Password store")
        return MockSecretStore()
    return OnePasswordCLI()
