"""
Router de exportação das listas de uma turma (CSV ou Excel).
"""

import uuid
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from turmas_api.database import get_db
from turmas_api.schemas.user import UserSession
from turmas_api.security import require_gestor
from turmas_api.services import export_service, turma_service

router = APIRouter(prefix="/api/v1/turmas", tags=["Exportações"])

MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@router.get("/{turma_id}/export/{kind}.{fmt}", summary="Exportar inscrições, presenças ou avaliações")
def export_turma(
    turma_id: uuid.UUID,
    kind: Literal["inscricoes", "presencas", "avaliacoes"],
    fmt: Literal["csv", "xlsx"],
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_gestor),
):
    if turma_service.get_turma(db, turma_id) is None:
        raise HTTPException(status_code=404, detail="Turma não encontrada.")

    content = export_service.export_turma(db, turma_id, kind, fmt)
    return StreamingResponse(
        iter([content]),
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f"attachment; filename={kind}_{turma_id}.{fmt}"},
    )
