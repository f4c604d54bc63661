"""
Tab-separated export of generated points.

Column layout follows the downstream GIS import format: 35 columns, X/Y first. Each record fills
X, Y, the fixed codes CODE_INSEE_SGA=20, NUMERO_INSEE=20096, z=0 and type=type_value; the rest
stay empty. The file is written in one go once the whole result set is ready.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from vegepoly.services.sampler import VegetationPoint

EXPORT_COLUMNS = [
    "X", "Y", "Nom", "NUMERO_DEPARTEMENT", "CODE_BASS", "CODE_INSEE", "IDIndexDATA", "CLEGCES",
    "NOM_PLAN_DEPLOIEMENT", "CODE_REGION", "CODE_INSEE_SGA", "champ_graphe", "longueur_specifique",
    "vitesse_specifique", "NUMERO_INSEE", "GROUPEMENT", "NOM_ZONE_OP", "SECTEUR_SINISTRE",
    "OBSERVATIONS", "DFCI_ID_MOT", "AUTRE_APPELATION", "AUTRE_APPELATION_1", "AUTRE_APPELATION_2",
    "AUTRE_APPELATION_3", "TYPE_AUTRE_APPELATION", "TYPE_AUTRE_APPELATION_1",
    "TYPE_AUTRE_APPELATION_2", "TYPE_AUTRE_APPELATION_3", "ADRESSE", "Longueur specifique",
    "Vitesse specifique", "IdZoneGeo", "z", "type", "ID",
]

FIXED_VALUES = {
    "CODE_INSEE_SGA": "20",
    "NUMERO_INSEE": "20096",
    "z": "0",
}


def export_filename(now: datetime | None = None) -> str:
    """e.g. 'Export 17-10-2026 14h05-09.txt'."""
    now = now or datetime.now()
    return f"Export {now.strftime('%d-%m-%Y %Hh%M-%S')}.txt"


def record_fields(point: VegetationPoint) -> list[str]:
    values = dict(FIXED_VALUES)
    values["X"] = repr(float(point.x))
    values["Y"] = repr(float(point.y))
    values["type"] = str(point.type_value)
    return [values.get(col, "") for col in EXPORT_COLUMNS]


def format_export(points: Iterable[VegetationPoint]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter="\t", lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(EXPORT_COLUMNS)
    for p in points:
        writer.writerow(record_fields(p))
    return buf.getvalue()


def write_export(path: str | Path, points: Iterable[VegetationPoint]) -> Path:
    """Write the full export in a single call; returns the path written."""
    out = Path(path)
    out.write_text(format_export(points), encoding="utf-8")
    return out
