import time
import asyncio
import logging
from typing import Dict, Any, List, Optional

from langchain_ollama import ChatOllama
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
import httpx

logger = logging.getLogger(__name__)


class OllamaClient:
    """
    LangChain-based Ollama client. Each call is bounded by its own timeout;
    failures propagate to the caller.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        temperature: float = 0.1,
        timeout: float = 120.0,
    ):
        # ChatOllama uses Ollama's native API, not OpenAI-compatible /v1 endpoint
        # Strip /v1 suffix if present
        if base_url.endswith("/v1"):
            base_url = base_url[:-3]
        elif base_url.endswith("/v1/"):
            base_url = base_url[:-4]

        self.base_url = base_url.rstrip('/')
        self.model = model
        self.timeout = timeout

        self.llm = ChatOllama(
            base_url=self.base_url,
            model=model,
            temperature=temperature,
            num_ctx=4096,  # Context window size
        )

    async def _invoke(self, messages: List[BaseMessage]) -> Any:
        try:
            return await asyncio.wait_for(
                self.llm.ainvoke(messages),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise TimeoutError(f"LLM request timed out after {self.timeout}s (model={self.model})")

    async def evaluate(self, prompt: str, instructions: Optional[str] = None) -> Dict[str, Any]:
        """
        Run a prompt and return the response with metadata.
        """
        start = time.time()

        messages: List[BaseMessage] = []
        if instructions:
            messages.append(SystemMessage(content=instructions))
        messages.append(HumanMessage(content=prompt))

        response = await self._invoke(messages)

        latency_ms = int((time.time() - start) * 1000)

        return {
            "raw": response,
            "content": response.content,
            "latency_ms": latency_ms,
        }

    async def generate(self, prompt: str, instructions: Optional[str] = None) -> str:
        """
        Run a prompt and return only the response text.
        """
        result = await self.evaluate(prompt, instructions=instructions)
        logger.debug(f"LLM response in {result['latency_ms']}ms")
        return str(result["content"]).strip()

    async def health_check(self) -> bool:
        """
        Check if the Ollama server is reachable by calling /api/tags.
        """
        url = f"{self.base_url}/api/tags"
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                resp = await client.get(url)
                if resp.status_code == 200:
                    return True
                logger.error(f"Ollama health check failed: {resp.status_code} {resp.text}")
                return False
        except httpx.HTTPError as e:
            logger.error(f"Ollama health check error: {e} (url={url})")
            return False
