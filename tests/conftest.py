from __future__ import annotations

from typing import Callable

import pytest

from ptflow_ai.common.schema import GenerationRequest, GenerationResult


class FakeGateway:
    """Records requests and answers them with ``reply(request)``."""

    def __init__(self, reply: Callable[[GenerationRequest], GenerationResult] | None = None) -> None:
        self.requests: list[GenerationRequest] = []
        self._reply = reply or (lambda request: GenerationResult(text="generated text"))

    def generate(self, request: GenerationRequest) -> GenerationResult:
        self.requests.append(request)
        return self._reply(request)


def fixed(text: str) -> FakeGateway:
    return FakeGateway(lambda request: GenerationResult(text=text))


def failing(message: str) -> FakeGateway:
    return FakeGateway(lambda request: GenerationResult.failure(message))


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()
