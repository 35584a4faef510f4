"""STDIO JSON-lines server and command-line entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from rootdex.commands import Commands
from rootdex.config import CliOverrides, Settings, load_effective_config
from rootdex.index import IndexStore, scan_sources
from rootdex.index.store import Scanner
from rootdex.logging import AuditEvent, JsonlAuditLogger, sanitize_arguments
from rootdex.tools.builtin import register_builtin_tools
from rootdex.tools.registry import CommandError, CommandRegistry

ONE_SHOT_COMMANDS = ("status", "refresh", "list", "candidates", "prune")
_RESULT_LOG_KEYS = ("strategy", "file_count", "fallback_reason", "removed")


@dataclass(slots=True, frozen=True)
class Request:
    """Normalized incoming request."""

    request_id: str
    method: str
    params: dict[str, object]


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for startup configuration."""
    parser = argparse.ArgumentParser(prog="rootdex")
    parser.add_argument(
        "command", nargs="?", choices=("serve", *ONE_SHOT_COMMANDS), default="serve"
    )
    parser.add_argument("--workspace", required=False, default=".")
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument("--width", type=int, required=False, default=None)
    parser.add_argument(
        "--external-scanner", choices=("true", "false"), required=False, default=None
    )
    parser.add_argument(
        "--search-in-path", choices=("true", "false"), required=False, default=None
    )
    return parser


class StdioServer:
    """Routes JSON-line requests to index commands and audits each one."""

    def __init__(self, settings: Settings, scanner: Scanner | None = None) -> None:
        self._settings = settings
        self._audit_logger = JsonlAuditLogger(path=settings.data_dir / "audit.jsonl")
        self._commands = Commands(
            settings,
            store=IndexStore(settings.sources, settings.index, scanner or scan_sources),
        )
        self._registry = CommandRegistry()
        register_builtin_tools(
            self._registry,
            commands=self._commands,
            settings=settings,
            read_audit_entries=self._audit_logger.read,
        )
        self._fallback_request_counter = 0

    @property
    def commands(self) -> Commands:
        return self._commands

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> None:
        """Process JSON-line requests from in_stream and write JSON-line responses."""
        for raw_line in in_stream:
            line = raw_line.strip()
            if not line:
                continue
            response = self.handle_json_line(line)
            out_stream.write(f"{json.dumps(response, sort_keys=True)}\n")
            out_stream.flush()

    def handle_json_line(self, raw_line: str) -> dict[str, object]:
        """Handle a single JSON-line request."""
        try:
            payload = json.loads(raw_line)
        except json.JSONDecodeError:
            request_id = self.next_request_id()
            response = self.error_response(
                request_id=request_id,
                code="INVALID_JSON",
                message="Request must be valid JSON.",
            )
            self.log_request(
                request_id=request_id,
                command="invalid_json",
                arguments={"raw_line_length": len(raw_line)},
                response=response,
            )
            return response
        return self.handle_payload(payload)

    def handle_payload(self, payload: object) -> dict[str, object]:
        """Validate and dispatch a parsed payload."""
        parsed = self.parse_request(payload)
        if isinstance(parsed, dict):
            request_id_value = parsed.get("request_id")
            request_id = (
                request_id_value if isinstance(request_id_value, str) else self.next_request_id()
            )
            self.log_request(
                request_id=request_id,
                command="invalid_request",
                arguments={},
                response=parsed,
            )
            return parsed

        request = parsed
        command: str
        arguments: dict[str, object]
        if request.method == "tools/call":
            name_value = request.params.get("name")
            arguments_value = request.params.get("arguments", {})
            if not isinstance(name_value, str) or not name_value:
                return self.invalid_params(
                    request.request_id, "tools/call params.name must be a non-empty string."
                )
            if not isinstance(arguments_value, dict):
                return self.invalid_params(
                    request.request_id, "tools/call params.arguments must be an object."
                )
            command = name_value
            arguments = arguments_value
        else:
            command = request.method
            arguments = request.params

        try:
            result = self._registry.dispatch(name=command, arguments=arguments)
        except CommandError as error:
            response = self.error_response(
                request_id=request.request_id,
                code=error.code,
                message=error.message,
            )
            self.log_request(
                request_id=request.request_id,
                command=command,
                arguments=arguments,
                response=response,
            )
            return response
        except Exception:
            response = self.error_response(
                request_id=request.request_id,
                code="INTERNAL_ERROR",
                message="Unhandled server error while executing command.",
            )
            self.log_request(
                request_id=request.request_id,
                command=command,
                arguments=arguments,
                response=response,
            )
            return response

        warnings = _extract_result_warnings(result)
        response = self.success_response(
            request_id=request.request_id,
            result=result,
            warnings=warnings,
        )
        self.log_request(
            request_id=request.request_id,
            command=command,
            arguments=arguments,
            response=response,
            details={key: result[key] for key in _RESULT_LOG_KEYS if key in result},
        )
        return response

    def invalid_params(self, request_id: str, message: str) -> dict[str, object]:
        """Build and log an INVALID_PARAMS response for a malformed tools/call."""
        response = self.error_response(
            request_id=request_id,
            code="INVALID_PARAMS",
            message=message,
        )
        self.log_request(
            request_id=request_id,
            command="tools/call",
            arguments={},
            response=response,
        )
        return response

    def parse_request(self, payload: object) -> Request | dict[str, object]:
        """Validate request payload and return normalized Request."""
        if not isinstance(payload, dict):
            return self.error_response(
                request_id=self.next_request_id(),
                code="INVALID_REQUEST",
                message="Request must be an object.",
            )

        request_id = self.extract_request_id(payload.get("id"))
        method = payload.get("method")
        params = payload.get("params", {})

        if not isinstance(method, str) or not method:
            return self.error_response(
                request_id=request_id,
                code="INVALID_REQUEST",
                message="Request method must be a non-empty string.",
            )
        if not isinstance(params, dict):
            return self.error_response(
                request_id=request_id,
                code="INVALID_PARAMS",
                message="Request params must be an object.",
            )

        return Request(request_id=request_id, method=method, params=params)

    def extract_request_id(self, request_id: object) -> str:
        """Extract request ID from payload or synthesize a sequential fallback."""
        if isinstance(request_id, str) and request_id:
            return request_id
        if isinstance(request_id, int):
            return str(request_id)
        return self.next_request_id()

    def next_request_id(self) -> str:
        self._fallback_request_counter += 1
        return f"req-{self._fallback_request_counter:06d}"

    @staticmethod
    def success_response(
        request_id: str,
        result: dict[str, object],
        warnings: list[str] | None = None,
    ) -> dict[str, object]:
        """Build success envelope."""
        return {
            "request_id": request_id,
            "ok": True,
            "result": result,
            "warnings": warnings or [],
        }

    @staticmethod
    def error_response(request_id: str, code: str, message: str) -> dict[str, object]:
        """Build explicit error envelope."""
        return {
            "request_id": request_id,
            "ok": False,
            "result": {},
            "warnings": [],
            "error": {"code": code, "message": message},
        }

    def log_request(
        self,
        request_id: str,
        command: str,
        arguments: dict[str, object],
        response: dict[str, object],
        details: dict[str, object] | None = None,
    ) -> None:
        """Log one sanitized request event."""
        metadata = sanitize_arguments(arguments)
        if details:
            metadata.update(sanitize_arguments(details))
        self._audit_logger.append(
            AuditEvent.for_response(
                request_id=request_id,
                command=command,
                response=response,
                metadata=metadata,
            )
        )


def create_server(
    workspace: str = ".",
    cli_overrides: CliOverrides | None = None,
    scanner: Scanner | None = None,
) -> StdioServer:
    """Create a server from the workspace config plus startup overrides."""
    settings = load_effective_config(workspace=Path(workspace), overrides=cli_overrides)
    return StdioServer(settings=settings, scanner=scanner)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint: serve JSON lines on stdio, or run one command and print it."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        use_external_scanner=_parse_flag(args.external_scanner),
        search_in_path=_parse_flag(args.search_in_path),
        display_width=args.width,
    )
    try:
        server = create_server(workspace=args.workspace, cli_overrides=overrides)
    except ValueError as error:
        parser.error(str(error))
    if args.command == "serve":
        server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
        return 0
    request = {
        "id": f"cli-{args.command}",
        "method": server.registry.qualify(args.command),
        "params": {},
    }
    response = server.handle_payload(request)
    sys.stdout.write(f"{json.dumps(response, sort_keys=True, indent=2)}\n")
    return 0 if response.get("ok") else 1


def _parse_flag(value: str | None) -> bool | None:
    if value is None:
        return None
    return value == "true"


def _extract_result_warnings(result: dict[str, object]) -> list[str]:
    raw = result.pop("__warnings__", None)
    if not isinstance(raw, list):
        return []
    warnings: list[str] = []
    for item in raw:
        if isinstance(item, str):
            warnings.append(item)
    return warnings


if __name__ == "__main__":
    raise SystemExit(main())
