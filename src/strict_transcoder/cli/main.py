"""Main CLI entry point for the strict-transcoder command-line tool.

Provides file conversion between the supported encodings, strict validation
of encoded files, and BOM detection.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from strict_transcoder import __version__
from strict_transcoder.api import Transcoder
from strict_transcoder.character.encoding import detect_bom
from strict_transcoder.shared.config import ConfigError, TranscoderConfig
from strict_transcoder.shared.result import DiagnosticSeverity
from strict_transcoder.shared.logging import configure_logging, get_logger

ENCODING_CHOICES = [
    "utf-8",
    "utf-16",
    "utf-16-be",
    "utf-16-le",
    "utf-32",
    "us-ascii",
    "iso-8859-1",
]

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self, transcoder_config: Optional[TranscoderConfig] = None):
        self.transcoder_config = transcoder_config or TranscoderConfig.lenient()
        self.verbose = False
        self.quiet = False

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The loaded settings never raise: the CLI reports failures as results.
        """
        config = cls()
        if config_path.exists():
            try:
                loaded = TranscoderConfig.from_file(config_path)
                config.transcoder_config = loaded.override(raise_on_error=False)
            except ConfigError as e:
                print(f"Warning: Could not load config file: {e}", file=sys.stderr)
        return config


class FileTranscoder:
    """File-level operations on top of a ``Transcoder``."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.transcoder = Transcoder(config.transcoder_config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def convert_file(
        self,
        source: Path,
        source_encoding: str,
        target_encoding: str,
        add_bom: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Decode ``source`` and re-encode it; returns a result record."""
        data = source.read_bytes()
        decoded = self.transcoder.decode(data, source_encoding)
        if not decoded.success:
            return self._failure(source, decoded.error)

        encoded = self.transcoder.encode(decoded.output, target_encoding, add_bom)
        if not encoded.success:
            return self._failure(source, encoded.error)

        return {
            "file": str(source),
            "success": True,
            "output": encoded.output,
            "detected_encoding": decoded.detected_encoding,
            "input_bytes": len(data),
            "output_bytes": len(encoded.output),
            "substitutions": encoded.metrics.substitutions,
            "warnings": [
                d.message for d in encoded.diagnostics
                if d.severity == DiagnosticSeverity.WARNING
            ],
        }

    def validate_file(self, path: Path, encoding: str) -> Dict[str, Any]:
        """Check that ``path`` decodes cleanly as ``encoding``."""
        if not path.exists():
            return {"file": str(path), "valid": False, "error": "File not found"}
        try:
            data = path.read_bytes()
        except OSError as e:
            return {
                "file": str(path), "valid": False, "error": f"Could not read file: {e}"
            }
        result = self.transcoder.decode(data, encoding)
        record: Dict[str, Any] = {
            "file": str(path),
            "valid": result.success,
            "detected_encoding": result.detected_encoding,
        }
        if not result.success and result.error is not None:
            record["reason"] = result.error.reason.value
            record["position"] = result.error.position
            record["error"] = str(result.error)
        return record

    def detect_file(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {"file": str(path), "bom": None, "error": "File not found"}
        try:
            with path.open("rb") as f:
                head = f.read(3)
        except OSError as e:
            return {
                "file": str(path), "bom": None, "error": f"Could not read file: {e}"
            }
        encoding = detect_bom(head)
        return {"file": str(path), "bom": encoding.value if encoding else None}

    def _failure(self, source: Path, error: Any) -> Dict[str, Any]:
        self.logger.failure("Conversion failed", error, extra={"file": str(source)})
        return {
            "file": str(source),
            "success": False,
            "reason": error.reason.value if error is not None else None,
            "position": error.position if error is not None else None,
            "error": str(error),
        }


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="strict-transcoder",
        description="Convert and validate text between Unicode and legacy encodings"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Convert a file")
    convert_parser.add_argument("input", type=Path, help="File to convert")
    convert_parser.add_argument(
        "--from",
        dest="source_encoding",
        choices=ENCODING_CHOICES,
        default="utf-8",
        help="Source encoding; utf-8 and utf-16 honour a BOM (default: utf-8)"
    )
    convert_parser.add_argument(
        "--to",
        dest="target_encoding",
        choices=ENCODING_CHOICES,
        default="utf-16",
        help="Target encoding (default: utf-16)"
    )
    convert_parser.add_argument(
        "--bom",
        action="store_true",
        default=None,
        help="Prefix output with a byte order mark"
    )
    convert_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate encoded files")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files to validate"
    )
    validate_parser.add_argument(
        "--encoding", "-e",
        choices=ENCODING_CHOICES,
        default="utf-8",
        help="Expected encoding (default: utf-8)"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Detect command
    detect_parser = subparsers.add_parser("detect", help="Report byte order marks")
    detect_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files to inspect"
    )
    detect_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_config(args: argparse.Namespace) -> CLIConfig:
    if args.config:
        config = CLIConfig.from_file(args.config)
    else:
        config = CLIConfig()
    config.verbose = args.verbose
    config.quiet = args.quiet
    return config


def cmd_convert(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle convert command."""
    if not args.input.exists():
        print(f"File not found: {args.input}", file=sys.stderr)
        return EXIT_FAILURE

    processor = FileTranscoder(config)
    try:
        result = processor.convert_file(
            args.input, args.source_encoding, args.target_encoding, args.bom
        )
    except (ValueError, OSError) as e:
        print(f"Conversion failed: {e}", file=sys.stderr)
        return EXIT_FAILURE
    if not result["success"]:
        print(f"Conversion failed: {result['error']}", file=sys.stderr)
        return EXIT_FAILURE

    for warning in result["warnings"]:
        if not args.quiet:
            print(f"Warning: {warning}", file=sys.stderr)

    if args.output:
        try:
            args.output.write_bytes(result["output"])
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return EXIT_FAILURE
        if not args.quiet:
            print(
                f"Converted {args.input} -> {args.output} "
                f"({result['input_bytes']} -> {result['output_bytes']} bytes)",
                file=sys.stderr,
            )
    else:
        sys.stdout.buffer.write(result["output"])
        sys.stdout.buffer.flush()
    return EXIT_OK


def format_validation(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format validation records for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    valid_count = sum(1 for r in results if r.get("valid", False))
    lines = [f"Validated {len(results)} files, {valid_count} valid", "-" * 50]
    for result in results:
        status = "✓" if result.get("valid", False) else "✗"
        lines.append(f"{status} {result['file']}")
        if not result.get("valid", False):
            lines.append(f"   Error: {result.get('error', '')}")
    return "\n".join(lines)


def cmd_validate(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle validate command."""
    processor = FileTranscoder(config)
    results = [processor.validate_file(path, args.encoding) for path in args.paths]
    print(format_validation(results, args.format))
    valid_count = sum(1 for r in results if r.get("valid", False))
    return EXIT_OK if valid_count == len(results) else EXIT_FAILURE


def cmd_detect(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle detect command."""
    processor = FileTranscoder(config)
    results = [processor.detect_file(path) for path in args.paths]
    if args.format == "json":
        print(json.dumps(results, indent=2))
    else:
        for result in results:
            if "error" in result:
                print(f"{result['file']}: {result['error']}")
            else:
                print(f"{result['file']}: {result['bom'] or 'no BOM'}")
    missing = sum(1 for r in results if "error" in r)
    return EXIT_OK if missing == 0 else EXIT_FAILURE


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILURE

    config = load_config(args)

    # Set up logging verbosity; the flags win over the configured level
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.transcoder_config.logging_level)

    try:
        if args.command == "convert":
            return cmd_convert(args, config)
        if args.command == "validate":
            return cmd_validate(args, config)
        if args.command == "detect":
            return cmd_detect(args, config)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return EXIT_FAILURE

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
