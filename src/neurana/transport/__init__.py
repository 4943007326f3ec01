"""Request execution: URL and header building, retry, response classification."""

from neurana.transport.executor import HttpClient, Operation
from neurana.transport.response import ResponseInterpreter
from neurana.transport.retry import RetryDecision, RetryPolicy

__all__ = ["HttpClient", "Operation", "ResponseInterpreter", "RetryDecision", "RetryPolicy"]
