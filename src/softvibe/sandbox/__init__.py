from .client import ExecutionClient, format_result

__all__ = ["ExecutionClient", "format_result"]
