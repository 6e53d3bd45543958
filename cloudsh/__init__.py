"""
cloudsh - virtual filesystem and streaming shell for the CloudOS terminal.

Main API:
    import asyncio
    from cloudsh import ShellEngine, VirtualFileSystem

    engine = ShellEngine(VirtualFileSystem(), pacing=0)

    async def main():
        # Stream output line by line
        async for line in engine.execute("cat welcome.msg"):
            print(line)

        # Or collect everything at once
        print(await engine.run_line("ls /etc"))

    asyncio.run(main())

Commands the engine does not implement are handed to an LLM-backed
"kernel" (see cloudsh.ai) when one is configured.
"""

from .vfs import VirtualFileSystem
from .repl import ShellEngine, CLEAR_SIGNAL

__version__ = "0.1.0"
__all__ = ["VirtualFileSystem", "ShellEngine", "CLEAR_SIGNAL"]
