"""Query client interface for the generative-language backend."""
from __future__ import annotations

class BaseQueryClient:
    def query(self, prompt: str) -> str:
        raise NotImplementedError
