"""Resolution of ``CLAUDIUS_SECRET_*`` variables for a child agent process."""

from ._expansion import SECRET_PREFIX, VariableGraph, VariableNode, expand_variables
from ._metrics import OpCallMetric, SecretResolutionMetrics
from ._references import extract_op_reference, substitute_references
from ._resolver import PROFILE_ENV, SecretResolver, inject_env_vars
from ._store import (
    MOCK_OP_ENV,
    MOCK_OP_TABLE,
    MockSecretStore,
    OnePasswordCLI,
    SecretStore,
    default_secret_store,
)

__all__ = [
    "MOCK_OP_ENV",
    "MOCK_OP_TABLE",
    "PROFILE_ENV",
    "SECRET_PREFIX",
    "MockSecretStore",
    "OnePasswordCLI",
    "OpCallMetric",
    "SecretResolutionMetrics",
    "SecretResolver",
    "SecretStore",
    "VariableGraph",
    "VariableNode",
    "default_secret_store",
    "expand_variables",
    "extract_op_reference",
    "inject_env_vars",
    "substitute_references",
]
