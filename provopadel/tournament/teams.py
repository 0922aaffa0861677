"""Team pairs: the optimistic roster and the CSV or spreadsheet pair import."""

from __future__ import annotations

import csv
import io
import itertools
import re
import unicodedata
import zipfile
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from provopadel.constants import IMPORT_ERROR_LIMIT
from provopadel.errors import ApiError, ValidationError


@dataclass
class ConfirmedTeam:
    """A pair the API has created."""

    id: int
    players: list[dict[str, Any]] = field(default_factory=list)
    schedule_constraints: Optional[str] = None

    pending = False


@dataclass
class PendingTeam:
    """A pair shown while its creation request is in flight."""

    temp_id: int
    players: list[dict[str, Any]] = field(default_factory=list)
    schedule_constraints: Optional[str] = None

    pending = True


Team = Union[ConfirmedTeam, PendingTeam]

_temp_ids = itertools.count(1)


def _player_preview(player: dict[str, Any]) -> dict[str, Any]:
    name = f"{player.get('first_name', '').strip()} {player.get('last_name', '').strip()}"
    return {
        "name": name.strip(),
        "category": player.get("category"),
        "gender": player.get("gender"),
    }


class TeamRoster:
    """The tournament's pairs as shown on the detail page."""

    def __init__(self, teams: list[Team] | None = None):
        self.teams: list[Team] = list(teams or [])

    @classmethod
    def from_api(cls, teams: list[dict[str, Any]] | None) -> TeamRoster:
        return cls(
            [
                ConfirmedTeam(
                    id=t["id"],
                    players=t.get("players") or [],
                    schedule_constraints=t.get("schedule_constraints"),
                )
                for t in (teams or [])
            ]
        )

    @property
    def confirmed(self) -> list[ConfirmedTeam]:
        return [t for t in self.teams if isinstance(t, ConfirmedTeam)]

    def add_pair(
        self, payload: dict[str, Any], send: Callable[[dict[str, Any]], Any]
    ) -> ConfirmedTeam:
        """Insert a pending pair, create it, then confirm or roll back.

        ``send`` posts the payload and returns ``{team_id, message}``. On
        failure the placeholder is removed and the error propagates.
        """
        placeholder = PendingTeam(
            temp_id=next(_temp_ids),
            players=[
                _player_preview(payload["player1"]),
                _player_preview(payload["player2"]),
            ],
            schedule_constraints=payload.get("schedule_constraints"),
        )
        self.teams.insert(0, placeholder)
        try:
            response = send(payload)
        except Exception:
            self.teams.remove(placeholder)
            raise

        confirmed = ConfirmedTeam(
            id=response["team_id"],
            players=placeholder.players,
            schedule_constraints=placeholder.schedule_constraints,
        )
        self.teams[self.teams.index(placeholder)] = confirmed
        return confirmed

    def remove(self, team_id: int) -> None:
        self.teams = [
            t for t in self.teams if not (isinstance(t, ConfirmedTeam) and t.id == team_id)
        ]

    def __iter__(self):
        return iter(self.teams)

    def __len__(self) -> int:
        return len(self.teams)


# --- pair import (CSV and .xlsx) -------------------------------------------

IMPORT_TEMPLATE_HEADERS = [
    "Jugador 1 Nombre",
    "Jugador 1 Apellido",
    "Jugador 2 Nombre",
    "Jugador 2 Apellido",
    "Categoria",
    "Genero",
    "Restricciones",
]
IMPORT_TEMPLATE_SAMPLE = ["Ana", "Perez", "Carla", "Gomez", "6", "Damas", "No puede viernes"]

HEADER_FIELD_MAP = {
    "jugador1nombre": "p1_first_name",
    "jugador1apellido": "p1_last_name",
    "jugador2nombre": "p2_first_name",
    "jugador2apellido": "p2_last_name",
    "categoria": "category",
    "genero": "gender",
    "restricciones": "constraints",
    "restriccioneshorarias": "constraints",
    "disponibilidad": "constraints",
}
FIELD_LABELS = dict(zip(
    ["p1_first_name", "p1_last_name", "p2_first_name", "p2_last_name",
     "category", "gender", "constraints"],
    IMPORT_TEMPLATE_HEADERS,
))
REQUIRED_FIELDS = ["p1_first_name", "p2_first_name", "category", "gender"]

CATEGORY_BY_DIGIT = {
    "1": "1ra", "2": "2da", "3": "3ra", "4": "4ta", "5": "5ta", "6": "6ta", "7": "7ma",
}


def normalize_header(value: str) -> str:
    """Lowercase, strip accents and anything that is not a letter or digit."""
    decomposed = unicodedata.normalize("NFD", value.strip().lower())
    without_accents = "".join(c for c in decomposed if not unicodedata.combining(c))
    return re.sub(r"[^a-z0-9]", "", without_accents)


def normalize_gender(value: str) -> str:
    normalized = value.strip().lower()
    if normalized in ("damas", "femenino", "mujer", "f"):
        return "damas"
    if normalized in ("masculino", "caballeros", "hombre", "m"):
        return "masculino"
    return normalized


def normalize_category(value: str) -> str:
    normalized = value.strip().lower()
    if not normalized:
        return ""
    digits = re.search(r"\d+", normalized)
    if digits and normalized == digits.group(0):
        return CATEGORY_BY_DIGIT.get(normalized, normalized)
    return normalized


def import_template_csv() -> str:
    """The downloadable template: headers and one sample row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(IMPORT_TEMPLATE_HEADERS)
    writer.writerow(IMPORT_TEMPLATE_SAMPLE)
    return buffer.getvalue()


def _cell_text(value: Any) -> str:
    """Spreadsheet cell as the text a user typed in it."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def read_csv_rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text.lstrip("\ufeff"))))


def read_xlsx_rows(data: bytes) -> list[list[str]]:
    """Rows of the first worksheet of an ``.xlsx`` workbook, as text."""
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(data), data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
        raise ValidationError("No se pudo leer el archivo Excel.") from e
    if not workbook.worksheets:
        raise ValidationError("El archivo no tiene hojas para importar.")
    sheet = workbook.worksheets[0]
    return [
        [_cell_text(value) for value in row]
        for row in sheet.iter_rows(values_only=True)
    ]


def parse_pair_rows(rows: list[list[str]]) -> tuple[list[dict[str, Any]], list[str]]:
    """Turn a header row plus data rows into pair payloads and per-row errors.

    Raises ValidationError when there are no data rows or a required column
    is missing.
    """
    if len(rows) < 2:
        raise ValidationError("El archivo no contiene filas para importar.")

    field_indexes: dict[str, int] = {}
    for idx, header in enumerate(rows[0]):
        mapped = HEADER_FIELD_MAP.get(normalize_header(header))
        if mapped:
            field_indexes[mapped] = idx

    missing = [f for f in REQUIRED_FIELDS if f not in field_indexes]
    if missing:
        labels = ", ".join(FIELD_LABELS.get(f, f) for f in missing)
        raise ValidationError(f"Faltan columnas requeridas: {labels}.")

    def cell(row: list[str], key: str) -> str:
        idx = field_indexes.get(key)
        if idx is None or idx >= len(row):
            return ""
        return row[idx].strip()

    pairs = []
    errors = []
    for row_number, row in enumerate(rows[1:], start=2):
        if not any(c.strip() for c in row):
            continue

        category = normalize_category(cell(row, "category"))
        gender = normalize_gender(cell(row, "gender"))
        p1_first = cell(row, "p1_first_name")
        p2_first = cell(row, "p2_first_name")
        if not p1_first or not p2_first or not category or not gender:
            errors.append(f"Fila {row_number}: faltan datos obligatorios.")
            continue

        constraints = cell(row, "constraints")
        pairs.append(
            {
                "player1": {
                    "first_name": p1_first,
                    "last_name": cell(row, "p1_last_name"),
                    "category": category,
                    "gender": gender,
                },
                "player2": {
                    "first_name": p2_first,
                    "last_name": cell(row, "p2_last_name"),
                    "category": category,
                    "gender": gender,
                },
                "schedule_constraints": constraints or None,
            }
        )
    return pairs, errors


def parse_pairs_csv(text: str) -> tuple[list[dict[str, Any]], list[str]]:
    """Parse an uploaded CSV into pair payloads and per-row errors."""
    return parse_pair_rows(read_csv_rows(text))


def parse_pairs_upload(
    filename: str, data: bytes
) -> tuple[list[dict[str, Any]], list[str]]:
    """Parse a CSV or ``.xlsx`` upload, picked by file extension.

    CSV files must be UTF-8; a decoding failure raises UnicodeDecodeError.
    """
    if filename.lower().endswith(".xlsx"):
        return parse_pair_rows(read_xlsx_rows(data))
    return parse_pairs_csv(data.decode("utf-8-sig"))


def import_pairs(
    roster: TeamRoster,
    pairs: list[dict[str, Any]],
    send: Callable[[dict[str, Any]], Any],
    errors: list[str] | None = None,
) -> dict[str, Any]:
    """Create every pair independently and summarize the outcome."""
    errors = list(errors or [])
    created = failed = 0
    for pair in pairs:
        try:
            roster.add_pair(pair, send)
        except ApiError as e:
            if e.is_unauthorized:
                raise
            failed += 1
            if len(errors) < IMPORT_ERROR_LIMIT:
                errors.append(e.message or "Error al importar una fila.")
        else:
            created += 1
    return {
        "total": len(pairs),
        "created": created,
        "failed": failed,
        "errors": errors[:IMPORT_ERROR_LIMIT],
    }
