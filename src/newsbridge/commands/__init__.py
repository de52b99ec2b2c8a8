from newsbridge.commands.router import CommandRouter

__all__ = ["CommandRouter"]
