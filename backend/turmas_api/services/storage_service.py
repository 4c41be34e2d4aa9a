"""
Armazenamento dos arquivos enviados (capas de turma, PDFs, fotos de palestrantes).

Cada envio é uma única requisição, gravada sob UPLOAD_DIR/<categoria>/<uuid>.<ext>
e servida em /uploads. Não há retomada de envio interrompido.
"""

import uuid
import logging
from pathlib import Path

from turmas_api.config import settings

logger = logging.getLogger(__name__)

IMAGE_TYPES = {"image/jpeg": ".jpg", "image/png": ".png", "image/webp": ".webp"}
PDF_TYPES = {"application/pdf": ".pdf"}

CATEGORIES = {
    "capas": IMAGE_TYPES,
    "pdfs": PDF_TYPES,
    "speakers": IMAGE_TYPES,
}


def save_upload(content: bytes, content_type: str, category: str) -> str:
    """
    Valida e grava o arquivo. Retorna a URL pública relativa (/uploads/...).
    Levanta ValueError para tipo não aceito, arquivo vazio ou grande demais.
    """
    allowed = CATEGORIES[category]
    if content_type not in allowed:
        raise ValueError(f"Tipo de arquivo não aceito. Tipos aceitos : {sorted(allowed)}")
    if not content:
        raise ValueError("O arquivo está vazio.")
    if len(content) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise ValueError(f"Arquivo muito grande. Tamanho máximo : {settings.MAX_UPLOAD_SIZE_MB} MB.")

    directory = Path(settings.UPLOAD_DIR) / category
    directory.mkdir(parents=True, exist_ok=True)

    filename = f"{uuid.uuid4()}{allowed[content_type]}"
    (directory / filename).write_bytes(content)

    logger.info("Arquivo gravado : %s/%s (%d bytes)", category, filename, len(content))
    return f"/uploads/{category}/{filename}"
