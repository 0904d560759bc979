import asyncio
import os
import sys
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError

from dme_orders.commons.errors import DmeOrderError, InvalidInputError, UnexpectedFailureError
from dme_orders.commons.logger import logger, setup_logging
from dme_orders.commons.note_parser import NoteParser, to_json
from dme_orders.commons.types import Settings
from dme_orders.helpers.http_transport import HttpSender
from dme_orders.services.orders_service import OrdersService
from dme_orders.validation.validators import note_from_envelope, validate_note_or_raise

app = typer.Typer(add_completion=False, help="DME Order Extractor")

DEFAULT_CONFIG = "dme_orders/configs/settings.yaml"
DEFAULT_NOTE_FILE = "physician_note.txt"
SAMPLE_NOTE = (
    "Patient needs a CPAP with full face mask and humidifier. AHI > 20. Ordered by Dr. Cameron."
)


def resource_path(relative_path: str) -> str:
    """Devuelve la ruta absoluta a un recurso, ya sea ejecutando como .exe o en desarrollo"""
    if hasattr(sys, "_MEIPASS"):
        base_path = sys._MEIPASS
    else:
        base_path = os.path.abspath(".")

    return os.path.join(base_path, relative_path)


def load_cfg(path: str = DEFAULT_CONFIG) -> Settings:
    config_path = path if os.path.isabs(path) else resource_path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return Settings.model_validate(raw)
    except (OSError, yaml.YAMLError, ValidationError) as ex:
        raise InvalidInputError(f"Configuración inválida en {config_path}: {ex}") from ex


def read_note(note_file: Optional[Path], json_envelope: bool) -> str:
    if note_file is None:
        default = Path(DEFAULT_NOTE_FILE)
        if not default.exists():
            logger.info("No se encontró physician_note.txt; usando nota de ejemplo")
            return SAMPLE_NOTE
        note_file = default

    try:
        raw = note_file.read_text(encoding="utf-8")
    except OSError as ex:
        raise InvalidInputError(f"No se pudo leer {note_file}: {ex}") from ex

    if json_envelope or note_file.suffix.lower() == ".json":
        return note_from_envelope(raw)
    return validate_note_or_raise(raw)


def _bootstrap(config: str) -> Settings:
    cfg = load_cfg(config)
    setup_logging(cfg.paths.logs_root, os.getenv("LOG_LEVEL", cfg.app.log_level))
    return cfg


def _run(fn) -> int:
    try:
        return fn()
    except DmeOrderError as ex:
        logger.error(f"{type(ex).__name__}: {ex}")
        return ex.exit_code
    except Exception as ex:
        logger.exception(f"Fallo no controlado: {ex}")
        return UnexpectedFailureError.exit_code


@app.command()
def extract(
    note_file: Optional[Path] = typer.Argument(None, help="Archivo con la nota del médico"),
    json_envelope: bool = typer.Option(False, "--json-envelope", help="La nota viene en {'data': ...}"),
    config: str = typer.Option(DEFAULT_CONFIG, help="Ruta del settings.yaml"),
):
    """Extrae la orden y la imprime como JSON."""

    def _main() -> int:
        cfg = _bootstrap(config)
        parser = NoteParser(cfg.extraction.pattern_timeout_sec)
        record = parser.parse(read_note(note_file, json_envelope))
        typer.echo(to_json(record, indent=2))
        return 0

    raise typer.Exit(code=_run(_main))


@app.command()
def submit(
    note_file: Optional[Path] = typer.Argument(None, help="Archivo con la nota del médico"),
    json_envelope: bool = typer.Option(False, "--json-envelope", help="La nota viene en {'data': ...}"),
    config: str = typer.Option(DEFAULT_CONFIG, help="Ruta del settings.yaml"),
):
    """Extrae la orden y la envía al API configurado."""

    def _main() -> int:
        cfg = _bootstrap(config)
        parser = NoteParser(cfg.extraction.pattern_timeout_sec)
        sender = HttpSender(cfg.api.endpoint_url, cfg.api.timeout_sec)
        svc = OrdersService(parser, sender)
        result = asyncio.run(svc.send_order(read_note(note_file, json_envelope)))
        if not result.ok:
            return result.error.exit_code if result.error else 5
        return 0

    raise typer.Exit(code=_run(_main))


if __name__ == "__main__":
    app()
