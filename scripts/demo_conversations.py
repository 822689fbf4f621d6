#!/usr/bin/env python3
"""Two interleaved conversations sharing nothing but the raw sinks.

Shows:
- from_scratch() giving each conversation its own tags
- fork() and fork_immediate() snapshotting tags at the fork point
- a non-forked call_soon() callback seeing a tag patched after it was scheduled

Usage:
    python scripts/demo_conversations.py
"""

from __future__ import annotations

import asyncio
from typing import Any

from substrate import (
    configure,
    fork,
    fork_immediate,
    from_scratch,
    logger,
    patch_logger_tags,
)


class PrintLogSink:
    def _print(self, level: str, record: dict[str, Any]) -> None:
        print(level, record)

    def debug(self, record: dict[str, Any]) -> None:
        self._print("DEBUG", record)

    def info(self, record: dict[str, Any]) -> None:
        self._print("INFO", record)

    def warning(self, record: dict[str, Any]) -> None:
        self._print("WARN", record)

    def error(self, record: dict[str, Any]) -> None:
        self._print("ERROR", record)


class PrintMetricsSink:
    def increment(self, record: dict[str, Any]) -> None:
        print("METRICS", record)


def _later(delay: float, callback: Any) -> None:
    asyncio.get_running_loop().call_later(delay, callback)


async def conversation(mood: str) -> None:
    # Every entry from here on carries the mood tag, in this conversation only.
    patch_logger_tags({"mood": mood})
    logger().info(f"every log entry will contain the tag mood {mood}")

    # Histories diverge here and never reconcile.
    def tagged_one() -> None:
        patch_logger_tags({"tag_1": "tag_1"})
        logger().info("with tag_1, but nothing else from below")

    fork(_later, 0.01, tagged_one)

    # Not forked yet when scheduled: tag_2 below bleeds in.
    def tagged_three() -> None:
        patch_logger_tags({"tag_3": "tag_3"})
        logger().info("with tag_3, but also tag_2!!")

    asyncio.get_running_loop().call_soon(fork, tagged_three)

    logger().info("this one does not have tag_1")

    fork_immediate(lambda: logger().info("with mood only"))

    # No fork here, so this one gets tag_2 as well.
    asyncio.get_running_loop().call_soon(
        lambda: logger().info("no forking here, so this will have tag_2!!")
    )

    patch_logger_tags({"tag_2": "tag_2"})
    logger().info("with tag_2 only :)")

    await asyncio.sleep(0.05)


async def main() -> None:
    configure(logger=PrintLogSink(), metrics=PrintMetricsSink())
    await asyncio.gather(
        from_scratch(conversation, "happy"),
        from_scratch(conversation, "grumpy"),
    )


if __name__ == "__main__":
    asyncio.run(main())
