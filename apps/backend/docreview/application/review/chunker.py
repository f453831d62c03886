"""
===============================================================================
CRC CARD — application/review/chunker.py
===============================================================================

Componente:
  Chunking de documentos por párrafos

Responsabilidades:
  - Partir el documento en fragmentos contiguos, sin huecos ni solapamientos.
  - Respetar la integridad de los párrafos (nunca cortar a mitad de oración).
  - Calcular `start` de cada fragmento para poder volver a offsets absolutos
    con una simple suma.

Colaboradores:
  - domain/entities.py (DocumentChunk)
  - application/usecases/review_document.py

Decisiones:
  - Un párrafo más largo que chunk_size queda como chunk propio (sobredimensionado):
    preferimos un exceso acotado antes que partir una oración.
  - chunk_size <= 0 desactiva el chunking.
===============================================================================
"""

from __future__ import annotations

from typing import Final

from ...domain.entities import DocumentChunk

_PARAGRAPH_SEPARATOR: Final[str] = "\n"


def chunk_document(text: str, chunk_size: int) -> list[DocumentChunk]:
    """
    Parte `text` en chunks alineados a párrafos, en orden.

    Reglas:
      - chunk_size <= 0 o texto corto -> un único chunk {start=0, text=text}.
      - Se acumulan párrafos; si sumar el siguiente excede chunk_size y el
        buffer no está vacío, se emite el buffer y se arranca uno nuevo.
    """
    if chunk_size <= 0 or len(text) <= chunk_size:
        return [DocumentChunk(start=0, text=text, index=0)]

    chunks: list[DocumentChunk] = []
    buffer = ""
    buffer_start = 0

    for i, paragraph in enumerate(text.split(_PARAGRAPH_SEPARATOR)):
        addition = paragraph if i == 0 else _PARAGRAPH_SEPARATOR + paragraph

        if buffer and len(buffer) + len(addition) > chunk_size:
            chunks.append(
                DocumentChunk(start=buffer_start, text=buffer, index=len(chunks))
            )
            # +1: el separador entre chunks no pertenece a ninguno
            buffer_start += len(buffer) + len(_PARAGRAPH_SEPARATOR)
            buffer = paragraph
        else:
            buffer += addition

    if buffer:
        chunks.append(DocumentChunk(start=buffer_start, text=buffer, index=len(chunks)))

    return chunks
