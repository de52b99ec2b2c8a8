"""WhatsApp news bot: commands, new-article alerts and a status page."""

__version__ = "0.1.0"
