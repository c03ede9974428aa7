import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List

from replicate_client.config import settings
from replicate_client.errors import ReplicateError
from replicate_client.models import PredictionStatus
from replicate_client.services.predictor import PredictionController
from replicate_client.services.replicate import ReplicateClient


def _parse_inputs(pairs: List[str]) -> Dict[str, Any]:
    # -i prompt="a cat" -i steps=20 : значения пробуем как JSON, иначе строка
    out: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise SystemExit(f"Bad input {pair!r}, expected key=value")
        try:
            out[key] = json.loads(raw)
        except ValueError:
            out[key] = raw
    return out


def _print(value: Any) -> None:
    print(json.dumps(value, ensure_ascii=False))


async def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="replicate_client", description="Run a Replicate prediction")
    parser.add_argument("model", help="owner/name or owner/name:version")
    parser.add_argument("-i", "--input", action="append", default=[], metavar="KEY=VALUE")
    parser.add_argument("--stream", action="store_true", help="print every intermediate output")
    parser.add_argument("--interval", type=int, default=None, help="polling interval, ms")
    parser.add_argument("--proxy-url", default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    path, _, version = args.model.partition(":")
    inputs = _parse_inputs(args.input)

    try:
        async with ReplicateClient(polling_interval=args.interval, proxy_url=args.proxy_url) as client:
            model = await client.models.get(path, version or None)
            if model.resolution and model.resolution.warning:
                print(model.resolution.warning, file=sys.stderr)

            last = None
            async for last in PredictionController(client).observe(model, inputs):
                if args.stream:
                    _print(last.output)
            if not args.stream:
                _print(last.output)
    except ReplicateError as ex:
        print(f"error: {ex}", file=sys.stderr)
        return 1

    if last.status is not PredictionStatus.SUCCEEDED:
        print(f"prediction {last.id} {last.status.value}: {last.error}", file=sys.stderr)
        return 1
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
