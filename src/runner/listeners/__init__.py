from .completion import LoggingCompletionListener

__all__ = ["LoggingCompletionListener"]
