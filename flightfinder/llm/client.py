from typing import Optional, Protocol

from langchain_openai import ChatOpenAI

from flightfinder.errors import ModelInvocationError


class ModelInvoker(Protocol):
    """Prompt in, text out. One response per call, no streaming."""

    async def invoke(self, prompt: str, max_tokens: int, temperature: float) -> str:
        ...


class OpenAIModel:
    """ModelInvoker backed by a LangChain chat model."""

    def __init__(self, model: str = "gpt-4o-mini", api_key: Optional[str] = None,
                 chat: Optional[ChatOpenAI] = None):
        self.model = model
        self._chat = chat or ChatOpenAI(model=model, api_key=api_key)

    async def invoke(self, prompt: str, max_tokens: int, temperature: float) -> str:
        try:
            res = await self._chat.bind(max_tokens=max_tokens, temperature=temperature).ainvoke(prompt)
        except Exception as e:
            raise ModelInvocationError("Language model call failed", cause=e, model=self.model)
        content = res.content
        if isinstance(content, list):
            # content blocks -> concatenated text
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part) for part in content
            )
        return content
