"""全局 pytest 配置 -- 可控时钟 + 零延迟远程调用 fixture"""

import pytest


class FakeClock:
    """可手动推进的单调时钟（秒）"""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedRemote:
    """零延迟远程调用，可切换为失败模式并统计调用次数"""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.error: Exception | None = None

    def fail_with(self, error: Exception | None) -> None:
        self.error = error

    async def __call__(self, operation: str) -> None:
        self.calls.append(operation)
        if self.error is not None:
            raise self.error


@pytest.fixture
def clock() -> FakeClock:
    """提供从 1000.0 秒开始的假时钟"""
    return FakeClock()


@pytest.fixture
def remote() -> ScriptedRemote:
    """提供零延迟、默认成功的远程调用"""
    return ScriptedRemote()
