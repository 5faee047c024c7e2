"""
Watch an AI persona debate in the terminal

    python -m debate_client --topic "AIは人間の仕事を奪う" --turns 6
    python -m debate_client --debate-id <id>

The server address comes from --base-url or DEBATE_API_URL.
"""

import argparse
import asyncio
import os
import sys
from typing import Optional

import httpx
from dotenv import load_dotenv

from .watcher import DebateWatcher, WatcherState

DEFAULT_BASE_URL = "http://localhost:8000"


class ConsolePresenter:
    """Prints streamed statements as they grow"""

    def __init__(self, names: dict[str, str], out=sys.stdout):
        self.names = names
        self.out = out
        self._persona: Optional[str] = None
        self._printed = 0

    def on_text(self, persona: Optional[str], text: str) -> None:
        if persona is None or not text:
            return
        if persona != self._persona:
            self._persona = persona
            self._printed = 0
            self.out.write(f"\n【{self.names.get(persona, persona)}】\n")
        self.out.write(text[self._printed:])
        self._printed = len(text)
        self.out.flush()

    def on_message(self, message: dict) -> None:
        # Flush whatever the last frame did not show yet
        if message["persona"] != self._persona:
            self.on_text(message["persona"], message["content"])
        else:
            self.out.write(message["content"][self._printed:])
        self.out.write("\n")
        self.out.flush()
        self._persona = None
        self._printed = 0


async def _create_debate(client: httpx.AsyncClient, topic: str, turns: int) -> str:
    response = await client.post("/debate/start", json={"topic": topic, "totalTurns": turns})
    payload = response.json()
    if not payload.get("result"):
        raise SystemExit(payload.get("message"))
    print(f"ディベートID: {payload['data']['id']}")
    return payload["data"]["id"]


async def watch(base_url: str, debate_id: Optional[str], topic: Optional[str], turns: int, summary: bool) -> int:
    timeout = httpx.Timeout(10.0, read=120.0)
    async with httpx.AsyncClient(base_url=base_url, timeout=timeout) as client:
        if debate_id is None:
            debate_id = await _create_debate(client, topic, turns)

        personas = (await client.get("/debate/personas")).json()["data"]["personas"]
        presenter = ConsolePresenter({p["key"]: p["name"] for p in personas})

        watcher = DebateWatcher(
            debate_id,
            client,
            on_text=presenter.on_text,
            on_message=presenter.on_message,
        )
        try:
            state = await watcher.run()
        finally:
            await watcher.stop()

        if state == WatcherState.FAILED:
            print(f"\nエラー: {watcher.error}", file=sys.stderr)
            return 1

        print(f"\nテーマ「{watcher.view.topic}」のディベートが終了しました。")

        if summary:
            payload = (await client.get(f"/debate/{debate_id}/summary")).json()
            if not payload.get("result"):
                print(f"要約エラー: {payload.get('message')}", file=sys.stderr)
                return 1
            print("\n=== まとめ ===")
            for name, text in payload["data"]["summary"].items():
                print(f"【{name}】{text}")

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="debate_client",
        description="Watch an AI persona debate as it is generated",
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--topic", help="start a new debate on this topic")
    target.add_argument("--debate-id", help="follow an existing debate")
    parser.add_argument("--turns", type=int, default=6, choices=(6, 9, 12), help="total turns (default: 6)")
    parser.add_argument("--base-url", default=os.getenv("DEBATE_API_URL", DEFAULT_BASE_URL))
    parser.add_argument("--no-summary", action="store_true", help="skip the summary at the end")
    args = parser.parse_args(argv)

    try:
        return asyncio.run(
            watch(args.base_url, args.debate_id, args.topic, args.turns, not args.no_summary)
        )
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
