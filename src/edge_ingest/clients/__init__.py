"""
Google API clients.

All clients take a shared authorized requests session (see auth.create_session)
and apply bounded per-call timeouts.
"""

from .auth import create_session
from .device_config import DeviceConfigStore
from .inference import InferenceClient
from .pubsub import PubSubChannel, subscription_path
from .storage import ObjectStore

__all__ = [
    "DeviceConfigStore",
    "InferenceClient",
    "ObjectStore",
    "PubSubChannel",
    "create_session",
    "subscription_path",
]
