"""Comput3 API configuration, endpoints and error messages."""

API_KEY_SETTING = "COMPUT3AI_API_KEY"
WALLET_ADDRESS_SETTING = "COMPUT3AI_WALLET_ADDRESS"

API_CONFIG = {
    "BASE_URL": "https://api.comput3.ai/api/v0",
    "TIMEOUT_SECONDS": 30.0,
    "API_KEY_HEADER": "X-C3-API-KEY",
    "REQUIRED_SETTINGS": (API_KEY_SETTING, WALLET_ADDRESS_SETTING),
}

# Suffix of domain-style workload identifiers, e.g. "firmly-widely-proud-gpu.comput3.ai"
WORKLOAD_DOMAIN_SUFFIX = ".comput3.ai"

DEFAULT_EXPIRES_MINUTES = 10

SERVICE_NAME = "comput3-agent"
SERVICE_VERSION = "0.1.0"


class Endpoints:
    """REST endpoints relative to the API base URL."""

    TYPES = "/types"  # GET
    BALANCE = "/balance"  # GET
    PROFILE = "/profile"  # GET
    LAUNCH = "/launch"  # POST
    STOP = "/stop"  # POST
    WORKLOADS = "/workloads"  # POST


class ErrorMessages:
    """User and log facing error messages."""

    MISSING_API_KEY = "Comput3AI API key is required but not provided"
    INVALID_WORKLOAD_ID = "Invalid workload ID provided"
    INVALID_WORKLOAD_TYPE = "Invalid workload type provided"
    NETWORK_ERROR = "Network error occurred while connecting to the Comput3AI API"
    UNKNOWN_ERROR = "An unknown error occurred"
    NO_MESSAGE_CONTENT = "No valid message content to extract workload ID from"
    WORKLOAD_ID_NOT_FOUND = "Could not extract workload ID"
