"""In-memory invoker for testing.

Returns canned responses (or raises a canned error) and records
every call. No litellm, no network.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from codenote.constants import InvokeStyle


@dataclass
class InvokeCall:
    model: str
    system_instruction: str
    user_content: str


class FakeInvoker:
    """Invoker returning ``response`` or raising ``error``."""

    def __init__(
        self,
        response: Any = None,
        *,
        error: BaseException | None = None,
        style: InvokeStyle = InvokeStyle.CHAT,
    ) -> None:
        self.response = response
        self.error = error
        self.style = style
        self.calls: list[InvokeCall] = []

    async def invoke(
        self, model: str, system_instruction: str, user_content: str
    ) -> Any:
        self.calls.append(
            InvokeCall(model, system_instruction, user_content)
        )
        if self.error is not None:
            raise self.error
        return self.response
