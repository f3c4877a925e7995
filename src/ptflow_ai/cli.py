"""Run one feature adapter from the command line.

The payload file holds the same JSON body the HTTP endpoint takes; YAML is
accepted too. No session check is made: this is an operator tool.

    ptflow-ai home-plan --input payload.yaml --pretty
"""
from __future__ import annotations
import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from ptflow_ai.adapters.base import GenerationError, Generator, InvalidInputError
from ptflow_ai.adapters.registry import FEATURES
from ptflow_ai.common.config import Settings
from ptflow_ai.common.logging_setup import setup_logging
from ptflow_ai.common.templates import load_template
from ptflow_ai.gateway.client import GatewayClient

LOGGER = logging.getLogger("ptflow.cli")


def load_payload(path: str) -> Any:
    """Read a JSON or YAML payload file ("-" for stdin)."""
    raw = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    return yaml.safe_load(raw) or {}


def run_feature(
    name: str,
    payload: Any,
    settings: Settings,
    gateway: Generator | None = None,
) -> dict[str, Any]:
    """
    Run the named feature and return its JSON-ready output.

    Args:
        name: Feature name, e.g. "soap-note".
        payload: Request body.
        settings: Settings for the default gateway and prompt pack.
        gateway: Completion client override.
    """
    feature = FEATURES[name]
    prompts = load_template(settings.prompts_path)
    output = feature.run(payload, gateway or GatewayClient(settings), prompts)
    return output.model_dump(mode="json", by_alias=True)


def main(argv: list[str] | None = None) -> int:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    ap = argparse.ArgumentParser(description="Run a PT Flow AI feature once")
    ap.add_argument("feature", choices=sorted(FEATURES), help="Feature to run")
    ap.add_argument("--input", required=True, help="JSON/YAML payload file, or - for stdin")
    ap.add_argument("--model", help="Override OPENROUTER_MODEL for this run")
    ap.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    args = ap.parse_args(argv)

    if args.model:
        settings = dataclasses.replace(settings, model=args.model)

    try:
        result = run_feature(args.feature, load_payload(args.input), settings)
    except InvalidInputError as e:
        LOGGER.error("%s", e)
        return 2
    except GenerationError as e:
        LOGGER.error("Generation failed: %s", e)
        return 1

    print(json.dumps(result, indent=2 if args.pretty else None))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
