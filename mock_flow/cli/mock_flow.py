"""
Command line entry point: generate Swift mocks from SourceKitten structure dumps.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from tqdm import tqdm

from mock_flow.core.config import MockFlowConfig, load_config
from mock_flow.core.loader import ProtocolDeclaration, load_structure, protocols_from_structure
from mock_flow.core.mock_generator import GenerationReport, MockGenerator
from mock_flow.core.overloads import resolve_identifiers


def _read_source(path: Optional[str]) -> str:
    if not path:
        return ""
    return Path(path).read_text(encoding="utf-8")


INPUT_ERRORS = (OSError, ValueError, yaml.YAMLError)

SourcedProtocols = Tuple[List[ProtocolDeclaration], str]


def _load_protocols(paths: List[str]) -> List[ProtocolDeclaration]:
    return [protocol for protocols, _ in _load_sourced_protocols(paths) for protocol in protocols]


def _load_sourced_protocols(paths: List[str], sources: Optional[List[str]] = None) -> List[SourcedProtocols]:
    """
    Load each structure dump together with the source text it was dumped from.

    Sources pair with structure files by position. Offsets in a dump only
    make sense against its own source file.
    """
    sources = sources or []
    if sources and len(sources) != len(paths):
        raise ValueError(
            f"got {len(sources)} --source files for {len(paths)} structure files; "
            "pass one per structure file or none"
        )
    loaded: List[SourcedProtocols] = []
    for index, path in enumerate(tqdm(paths, desc="Loading structure files", disable=len(paths) < 2)):
        protocols = protocols_from_structure(load_structure(Path(path)))
        content = _read_source(sources[index]) if sources else ""
        loaded.append((protocols, content))
    return loaded


def _build_generator(config: MockFlowConfig, content: str) -> MockGenerator:
    return MockGenerator(mock_suffix=config.mock_suffix, content=content, **config.templates())


def format_output(config: MockFlowConfig, report: GenerationReport) -> str:
    parts = []
    if config.header:
        parts.append(config.header)
    if config.imports:
        parts.append("\n".join(f"import {module}" for module in config.imports))
    parts.extend(report.rendered)
    return "\n\n".join(parts) + "\n"


def _resolve_config(args: argparse.Namespace) -> MockFlowConfig:
    cli_overrides: Dict[str, Any] = {
        "mock_suffix": getattr(args, "suffix", None),
        "output_path": getattr(args, "output", None),
        "log_level": getattr(args, "log_level", None),
    }
    return load_config(config_path=getattr(args, "config", None), cli_args=cli_overrides)


def _run_generate(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    logging.getLogger().setLevel(config.log_level.upper())

    try:
        loaded = _load_sourced_protocols(args.structure, args.source)
    except INPUT_ERRORS as e:
        print(f"❌ Error: could not read input: {e}", file=sys.stderr)
        return 1

    if not any(protocols for protocols, _ in loaded):
        print("No protocols found in the structure input.", file=sys.stderr)
        return 0

    report = GenerationReport()
    for protocols, content in loaded:
        report.mocks.extend(_build_generator(config, content).generate_all(protocols).mocks)
    output = format_output(config, report)

    if config.output_path:
        Path(config.output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(config.output_path, 'w', encoding='utf-8') as f:
            f.write(output)
        print(f"📄 Mocks written to {config.output_path}", file=sys.stderr)
    else:
        sys.stdout.write(output)

    for failure in report.failures:
        print(f"⚠️  Skipped {failure.describe()}", file=sys.stderr)
    return 0


def _run_names(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    try:
        protocols = _load_protocols(args.structure)
    except INPUT_ERRORS as e:
        print(f"❌ Error: could not read input: {e}", file=sys.stderr)
        return 1

    generator = _build_generator(config, "")
    results = []
    for protocol in protocols:
        models, failures = generator.build_models(protocol)
        for model, level in zip(models, resolve_identifiers(models)):
            results.append({
                "protocol": protocol.name,
                "offset": model.offset,
                "name": model.name,
                "medium_name": model.medium_name,
                "long_name": model.long_name,
                "full_name": model.full_name,
                "chosen": model.identifier(level),
            })
        for failure in failures:
            print(f"⚠️  Skipped {failure.describe()}", file=sys.stderr)
    print(json.dumps(results, indent=2))
    return 0


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("structure", nargs='+',
                        help="SourceKitten structure dump(s) (JSON or YAML).")
    parser.add_argument("--config", help="Path to configuration YAML file (default: mockflow.config.yaml)")
    parser.add_argument("--log-level", help="Logging level (default: INFO).")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="mock_flow CLI: generate Swift protocol mocks from SourceKitten structure dumps."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate mock classes")
    _add_common_flags(generate)
    generate.add_argument("--source", action="append",
                          help="Swift source a structure file was dumped from; needed to copy @available "
                               "attributes. Repeat once per structure file, in the same order.")
    generate.add_argument("--output", help="Write mocks to a file instead of stdout.")
    generate.add_argument("--suffix", help="Mock class name suffix (default: Mock).")
    generate.set_defaults(func=_run_generate)

    names = subparsers.add_parser("names", help="Show the identifiers chosen for each method")
    _add_common_flags(names)
    names.set_defaults(func=_run_names)

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point for the generator."""
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        exit_code = args.func(args)
        sys.exit(exit_code)
    except Exception as e:
        print(f"\n❌ An unexpected error occurred: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
