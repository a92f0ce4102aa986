from cpas.dispatch.dispatcher import CallRequest, CompletionHandler, Dispatcher
from cpas.dispatch.outcome import CallOutcome
from cpas.dispatch.pool import WorkerPool

__all__ = ["CallOutcome", "CallRequest", "CompletionHandler", "Dispatcher", "WorkerPool"]
