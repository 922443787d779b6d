"""Calling conventions for the generation capability.

Providers behind litellm do not all accept the same request shape
(some models reject a separate system role). Each convention is a
small adapter with one ``invoke`` method; which one is primary is
decided from configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any, Protocol

import litellm

from codenote.constants import LLM_MAX_OUTPUT_TOKENS, InvokeStyle

logger = logging.getLogger(__name__)

# litellm stubs have partially unknown types; typed alias
if TYPE_CHECKING:
    _acompletion: Callable[..., Coroutine[Any, Any, Any]]
else:
    _acompletion = litellm.acompletion


class Invoker(Protocol):
    style: InvokeStyle

    async def invoke(
        self, model: str, system_instruction: str, user_content: str
    ) -> Any: ...


class ChatInvoker:
    """System instruction and user content as separate chat messages."""

    style = InvokeStyle.CHAT

    def __init__(self, api_key: str, timeout: int) -> None:
        self._api_key = api_key
        self._timeout = timeout

    async def invoke(
        self, model: str, system_instruction: str, user_content: str
    ) -> Any:
        return await _acompletion(
            model=model,
            messages=[
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_content},
            ],
            api_key=self._api_key,
            timeout=self._timeout,
            max_tokens=LLM_MAX_OUTPUT_TOKENS,
        )


class PromptInvoker:
    """Instruction folded into a single user message."""

    style = InvokeStyle.PROMPT

    def __init__(self, api_key: str, timeout: int) -> None:
        self._api_key = api_key
        self._timeout = timeout

    async def invoke(
        self, model: str, system_instruction: str, user_content: str
    ) -> Any:
        prompt = f"{system_instruction}\n\n{user_content}"
        return await _acompletion(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            api_key=self._api_key,
            timeout=self._timeout,
            max_tokens=LLM_MAX_OUTPUT_TOKENS,
        )


INVOKERS: dict[InvokeStyle, type[ChatInvoker] | type[PromptInvoker]] = {
    InvokeStyle.CHAT: ChatInvoker,
    InvokeStyle.PROMPT: PromptInvoker,
}
