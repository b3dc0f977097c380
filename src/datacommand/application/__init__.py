from .command import DataCommand

__all__ = ["DataCommand"]
