"""Generation capability: model handle and calling conventions."""

from codenote.generation.capability import (
    GenerationCapability,
    build_capability,
)
from codenote.generation.invokers import ChatInvoker, Invoker, PromptInvoker

__all__ = [
    "ChatInvoker",
    "GenerationCapability",
    "Invoker",
    "PromptInvoker",
    "build_capability",
]
