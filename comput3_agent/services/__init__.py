"""Business logic services for the Comput3 workload agent."""

from comput3_agent.services.comput3_client import Comput3Client, MissingCredentialError
from comput3_agent.services.error_translator import ErrorTranslator
from comput3_agent.services.extractors import (
    extract_expiration_minutes,
    extract_workload_id,
    extract_workload_type,
)
from comput3_agent.services.validators import is_launch_intent, is_stop_intent

__all__ = [
    "Comput3Client",
    "MissingCredentialError",
    "ErrorTranslator",
    "extract_expiration_minutes",
    "extract_workload_id",
    "extract_workload_type",
    "is_launch_intent",
    "is_stop_intent",
]
