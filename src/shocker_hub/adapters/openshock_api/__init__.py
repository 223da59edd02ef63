"""OpenShock control API adapter."""

from shocker_hub.adapters.openshock_api.http_client import OpenShockHttpClient, classify_response

__all__ = ["OpenShockHttpClient", "classify_response"]
