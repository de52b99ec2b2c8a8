"""Provider factory — creates the configured messaging transport."""

from newsbridge.config import AppConfig
from newsbridge.transport.base import MessagingTransport

TRANSPORT_PROVIDERS = {
    "neonize": "newsbridge.transport.neonize_client:NeonizeTransport",
}


def _import_class(path: str):
    """Import a class from a 'module:ClassName' string."""
    module_path, class_name = path.split(":")
    import importlib

    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def create_transport(config: AppConfig) -> MessagingTransport:
    """Create a messaging transport based on config.transport.provider."""
    name = config.transport.provider
    if name not in TRANSPORT_PROVIDERS:
        raise ValueError(
            f"Unknown transport provider: '{name}'. Available: {list(TRANSPORT_PROVIDERS.keys())}"
        )
    cls = _import_class(TRANSPORT_PROVIDERS[name])
    return cls(config)
