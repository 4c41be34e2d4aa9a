"""
Exportação das listas de uma turma (inscrições, presenças, avaliações) em CSV e Excel.

CSV : UTF-8 com BOM (abre corretamente no Excel), todos os campos entre aspas.
"""

import csv
import io
import uuid
from datetime import date, datetime
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from sqlalchemy.orm import Session

from turmas_api.services.attendance_service import get_turma_attendance
from turmas_api.services.enrollment_service import get_turma_enrollments
from turmas_api.services.evaluation_service import get_turma_evaluations

EXPORT_HEADERS = {
    "inscricoes": ["nome", "email", "telefone", "status", "data_inscricao"],
    "presencas": ["nome", "email", "presente", "marcado_em", "marcado_por"],
    "avaliacoes": ["nome", "email", "nps", "comentario", "enviada_em"],
}

SHEET_TITLES = {
    "inscricoes": "Inscrições",
    "presencas": "Presenças",
    "avaliacoes": "Avaliações",
}


def _fmt(value: Any) -> str:
    """Datas no formato brasileiro, booleanos como Sim/Não."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Sim" if value else "Não"
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y %H:%M")
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    return str(value)


def build_rows(db: Session, turma_id: uuid.UUID, kind: str) -> List[Dict[str, Any]]:
    """Monta as linhas da exportação, com as chaves de EXPORT_HEADERS[kind]."""
    if kind == "inscricoes":
        return [
            {
                "nome": i.user.nome,
                "email": i.user.email,
                "telefone": i.user.telefone,
                "status": i.status,
                "data_inscricao": i.created_at,
            }
            for i in get_turma_enrollments(db, turma_id)
        ]
    if kind == "presencas":
        return [
            {
                "nome": p.nome,
                "email": p.email,
                "presente": p.presente,
                "marcado_em": p.marcado_em,
                "marcado_por": p.marcador_nome,
            }
            for p in get_turma_attendance(db, turma_id)
        ]
    if kind == "avaliacoes":
        return [
            {
                "nome": a.nome,
                "email": a.email,
                "nps": a.nps,
                "comentario": a.comentario,
                "enviada_em": a.enviada_em,
            }
            for a in get_turma_evaluations(db, turma_id)
        ]
    raise ValueError(f"Tipo de exportação inválido : {kind}")


def to_csv(rows: List[Dict[str, Any]], headers: List[str]) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_fmt(row.get(h)) for h in headers])
    return ("\ufeff" + output.getvalue()).encode("utf-8")


def to_xlsx(rows: List[Dict[str, Any]], headers: List[str], title: str) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]

    ws.append(headers)
    header_fill = PatternFill(start_color="1F2937", end_color="1F2937", fill_type="solid")
    for cell in ws[1]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")

    for row in rows:
        ws.append([_fmt(row.get(h)) for h in headers])

    for idx, header in enumerate(headers, start=1):
        width = max([len(header)] + [len(_fmt(row.get(header))) for row in rows])
        ws.column_dimensions[get_column_letter(idx)].width = min(width + 2, 60)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def export_turma(db: Session, turma_id: uuid.UUID, kind: str, fmt: str) -> bytes:
    """Gera o arquivo de exportação. fmt ∈ {csv, xlsx}."""
    rows = build_rows(db, turma_id, kind)
    headers = EXPORT_HEADERS[kind]
    if fmt == "csv":
        return to_csv(rows, headers)
    if fmt == "xlsx":
        return to_xlsx(rows, headers, SHEET_TITLES[kind])
    raise ValueError(f"Formato de exportação inválido : {fmt}")
