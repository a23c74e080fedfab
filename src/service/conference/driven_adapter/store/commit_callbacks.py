from typing import Awaitable, Callable, Sequence

from src.platform.logging.loguru_io import Logger


async def run_commit_callbacks(callbacks: Sequence[Callable[[], Awaitable[None]]]) -> None:
    """Run side effects registered through ITransaction.on_commit, in order."""
    for callback in callbacks:
        try:
            await callback()
        except Exception as e:
            # Commit already applied; report and keep going
            Logger.base.opt(exception=e).error(f'❌ [STORE] On-commit callback failed: {e}')
