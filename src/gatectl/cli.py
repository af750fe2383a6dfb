import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any

import httpx

from gatedview.classifier import explain
from gatedview.config import PolicyConfig, load_config, load_settings
from gatedview.errors import LoadError
from gatedview.host import host_action


def _print_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=True))
    sys.stdout.write("\n")


def _load_or_exit(path: str) -> PolicyConfig:
    try:
        return load_config(path)
    except LoadError as exc:
        _print_json({"status": "error", "error": str(exc), "problems": exc.problems})
        raise SystemExit(1)


def health(base_url: str) -> int:
    try:
        resp = httpx.get(f"{base_url}/health", timeout=5)
        resp.raise_for_status()
        _print_json(resp.json())
        return 0
    except httpx.HTTPError as exc:
        _print_json({"status": "error", "error": str(exc)})
        return 1


def remote_classify(base_url: str, url: str, is_main_frame: bool) -> int:
    try:
        resp = httpx.post(
            f"{base_url}/v1/classify",
            json={"url": url, "is_main_frame": is_main_frame},
            timeout=10,
        )
        resp.raise_for_status()
        _print_json(resp.json())
        return 0
    except httpx.HTTPError as exc:
        _print_json({"status": "error", "error": str(exc)})
        return 1


def classify_local(config: PolicyConfig, url: str, is_main_frame: bool) -> dict:
    verdict = explain(url, is_main_frame, config)
    return {
        "url": url,
        "is_main_frame": is_main_frame,
        "disposition": verdict.disposition.value,
        "rule": verdict.rule,
        "matched": verdict.matched,
        "action": host_action(verdict.disposition, is_main_frame).as_dict(),
    }


def init_config(args: argparse.Namespace) -> int:
    try:
        config = PolicyConfig.from_builder(
            domain=args.domain,
            start_url=args.start_url or f"https://{args.domain}",
            additional_domains=args.additional_domain or [],
            view_mode=args.view_mode,
            block_media=args.block_media,
            ads_blocker=args.ads_blocker,
            no_ssl_mode=args.no_ssl_mode,
        )
    except LoadError as exc:
        _print_json({"status": "error", "error": str(exc), "problems": exc.problems})
        return 1
    document = json.dumps(config.to_document(legacy_ssl_key=args.legacy_ssl_key), indent=2)
    if args.output:
        Path(args.output).write_text(document + "\n", encoding="utf-8")
        _print_json({"status": "ok", "output": args.output})
    else:
        sys.stdout.write(document)
        sys.stdout.write("\n")
    return 0


def serve(config_path: str) -> None:
    import uvicorn

    from gatedview.service import create_app

    settings = load_settings(os.getenv("GATEDVIEW_SETTINGS"))
    app = create_app(config=_load_or_exit(config_path), settings=settings)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level="info")


def main() -> None:
    parser = argparse.ArgumentParser(prog="gatectl")
    parser.add_argument(
        "--base-url",
        default="http://127.0.0.1:7600",
        help="Base URL for the gatedview service",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("health", help="Check service health")

    validate_parser = subparsers.add_parser("validate", help="Validate a policy document")
    validate_parser.add_argument("--config", required=True)

    classify_parser = subparsers.add_parser("classify", help="Classify a URL locally")
    classify_parser.add_argument("url")
    classify_parser.add_argument("--config", required=True)
    classify_parser.add_argument("--subresource", action="store_true")

    remote_parser = subparsers.add_parser(
        "remote-classify", help="Classify a URL through the service"
    )
    remote_parser.add_argument("url")
    remote_parser.add_argument("--subresource", action="store_true")

    init_parser = subparsers.add_parser("init", help="Build a policy document")
    init_parser.add_argument("--domain", required=True)
    init_parser.add_argument("--start-url")
    init_parser.add_argument("--additional-domain", action="append")
    init_parser.add_argument("--view-mode", default="AUTO")
    init_parser.add_argument("--block-media", action="store_true")
    init_parser.add_argument("--ads-blocker", action="store_true")
    init_parser.add_argument("--no-ssl-mode", action="store_true")
    init_parser.add_argument(
        "--legacy-ssl-key",
        action="store_true",
        help="Write ignoreSSLErrors instead of ignoreSslErrors (older app builds read only that key)",
    )
    init_parser.add_argument("--output", help="Write the document to this path")

    serve_parser = subparsers.add_parser("serve", help="Run the classification service")
    serve_parser.add_argument("--config", default=os.getenv("GATEDVIEW_CONFIG"))

    args = parser.parse_args()

    if args.command == "health":
        raise SystemExit(health(args.base_url))
    if args.command == "remote-classify":
        raise SystemExit(remote_classify(args.base_url, args.url, not args.subresource))
    if args.command == "validate":
        config = _load_or_exit(args.config)
        _print_json(
            {
                "status": "ok",
                "domain": config.domain,
                "allowed_domains": list(config.allowed_domains),
                "orientation": config.orientation.value,
            }
        )
        raise SystemExit(0)
    if args.command == "classify":
        config = _load_or_exit(args.config)
        _print_json(classify_local(config, args.url, not args.subresource))
        raise SystemExit(0)
    if args.command == "init":
        raise SystemExit(init_config(args))
    if args.command == "serve":
        if not args.config:
            _print_json({"status": "error", "error": "Provide --config or GATEDVIEW_CONFIG"})
            raise SystemExit(1)
        serve(args.config)


if __name__ == "__main__":
    main()
