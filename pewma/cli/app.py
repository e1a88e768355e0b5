from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable
from pathlib import Path

import yaml

from pewma.config.settings import SettingsLoader
from pewma.core.logging_setup import configure_logging
from pewma.core.orchestrator import StreamRunner
from pewma.detection.config import ConfigError


def _add_stream_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--input", default="-", help="Archivo con un valor por línea ('-' para stdin)")
    parser.add_argument("--threshold", type=float, default=None, help="Umbral de densidad para outliers")
    parser.add_argument("--max-values", type=int, default=None)
    parser.add_argument("--only-outliers", action="store_true", help="Emite sólo los outliers")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pewma", description="PEWMA STREAM DETECTOR")
    parser.add_argument("--config", default="pewma.yaml", help="Ruta del archivo YAML")

    sub = parser.add_subparsers(dest="command", required=False)

    p_run = sub.add_parser("run", help="Analiza una serie de valores")
    _add_stream_arguments(p_run)

    sub.add_parser("init-config", help="Genera YAML por defecto")

    p_quick = sub.add_parser("quickstart", help="Prepara configuración inicial y analiza stdin")
    _add_stream_arguments(p_quick)
    return parser


def _ensure_config(config_path: str) -> None:
    config_file = Path(config_path)
    if config_file.exists():
        return
    SettingsLoader.dump_default(config_path)
    print(f"[quickstart] Configuración base creada en {config_path}", file=sys.stderr)


def _emit(runner: StreamRunner, lines: Iterable[str], max_values: int | None, only_outliers: bool) -> None:
    for verdict in runner.run_lines(lines, max_values=max_values):
        if only_outliers and not verdict.is_outlier:
            continue
        print(json.dumps(verdict.to_dict(), ensure_ascii=False))
    print(json.dumps({"summary": runner.stats.to_dict()}, ensure_ascii=False), file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    command = args.command or "quickstart"

    if command == "quickstart":
        _ensure_config(args.config)
        command = "run"

    if command == "init-config":
        SettingsLoader.dump_default(args.config)
        print(f"Configuración creada en {args.config}")
        return

    if not Path(args.config).exists():
        parser.error(f"No existe {args.config}; genere uno con 'pewma init-config'")

    try:
        settings = SettingsLoader.load(args.config)
        configure_logging(settings.log_level)
    except (TypeError, ValueError, yaml.YAMLError) as exc:
        parser.error(f"Configuración inválida en {args.config}: {exc}")

    try:
        runner = StreamRunner.from_settings(settings, threshold=getattr(args, "threshold", None))
    except ConfigError as exc:
        parser.error(str(exc))

    max_values = getattr(args, "max_values", None)
    only_outliers = getattr(args, "only_outliers", False) or settings.output.only_outliers
    source = getattr(args, "input", "-")

    if source == "-":
        _emit(runner, sys.stdin, max_values, only_outliers)
        return

    input_path = Path(source)
    if not input_path.exists():
        parser.error(f"No existe el archivo de entrada: {source}")
    # Bytes no UTF-8 se reemplazan y la línea se descarta como inválida.
    with input_path.open(encoding="utf-8", errors="replace") as fh:
        _emit(runner, fh, max_values, only_outliers)


if __name__ == "__main__":
    main()
