"""
===============================================================================
CRC CARD — application/review/response_parser.py
===============================================================================

Componente:
  Parser de respuestas del modelo (texto libre -> list[Suggestion])

Responsabilidades:
  - Ubicar el array JSON dentro de la respuesta (primer "[" / último "]").
  - Reparar salidas truncadas (cierre sintético tras el último "}").
  - Reparar JSON "casi válido" (comas colgantes, último elemento incompleto).
  - Validar cada item resolviendo alias de campos con una tabla explícita.
  - Anclar opcionalmente las sugerencias al texto del chunk.
  - Reportar problemas como advertencia no fatal (`parse_error`), nunca adivinar.

Colaboradores:
  - application/review/anchoring.py (anchor_suggestions)
  - crosscutting/exceptions.py (ResponseFormatError / ResponseTruncatedError / ResponseSchemaError)
  - domain/entities.py (Suggestion, ParseResult)

Notas:
  - Las etapas lanzan excepciones tipadas internamente; la frontera pública
    (`parse_review_response`) las convierte en `parse_error`.
  - Los mensajes son visibles para el usuario final (UI en chino).
===============================================================================
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Final, Optional

from ...crosscutting.exceptions import (
    ResponseFormatError,
    ResponseSchemaError,
    ResponseTruncatedError,
)
from ...crosscutting.logger import logger
from ...domain.entities import ParseResult, Suggestion, SuggestionType
from .anchoring import anchor_suggestions

EMPTY_CONTENT_MESSAGE: Final[str] = "AI 返回了空内容"

# Largo del fragmento de la respuesta incluido en diagnósticos.
_SNIPPET_CHARS: Final[int] = 200

_TRAILING_COMMA_RE: Final[re.Pattern[str]] = re.compile(r",\s*([}\]])")


# -----------------------------------------------------------------------------
# Tabla de alias (orden = prioridad)
# -----------------------------------------------------------------------------


def _is_number(value: Any) -> bool:
    # bool es subclase de int: no cuenta como número. NaN/Infinity tampoco.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


@dataclass(frozen=True)
class FieldAliases:
    """Resolución de un campo: primera clave presente cuyo valor pasa `accepts`."""

    keys: tuple[str, ...]
    accepts: Callable[[Any], bool]

    def resolve(self, item: dict[str, Any]) -> Any:
        for key in self.keys:
            value = item.get(key)
            if self.accepts(value):
                return value
        return None


FIELD_ALIASES: Final[dict[str, FieldAliases]] = {
    "offset": FieldAliases(("offset", "location"), _is_number),
    "length": FieldAliases(("length",), _is_number),
    "original": FieldAliases(("original", "text"), _is_string),
    "suggestion": FieldAliases(("suggestion", "replacement", "fix"), _is_string),
    "reason": FieldAliases(("reason", "explanation", "description"), _is_string),
    "ruleCategory": FieldAliases(("ruleCategory", "category"), _is_string),
    "type": FieldAliases(("type",), _is_string),
}


def _js_typeof(value: Any) -> str:
    """Nombre de tipo al estilo JSON/JS para el mensaje de error."""
    if isinstance(value, bool):
        return "boolean"
    if _is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


# -----------------------------------------------------------------------------
# Etapas
# -----------------------------------------------------------------------------


def _extract_payload(cleaned: str) -> tuple[str, bool]:
    """
    Devuelve (json_str, was_truncated).

    Raises:
        ResponseFormatError: no hay "[" en la respuesta.
        ResponseTruncatedError: truncada y sin ningún "}" para cerrar.
    """
    start = cleaned.find("[")
    end = cleaned.rfind("]")

    logger.debug(
        "Parser: locating payload",
        extra={"text_length": len(cleaned), "bracket_start": start, "bracket_end": end},
    )

    if start == -1:
        raise ResponseFormatError(
            f'无法在 AI 返回中找到 JSON 数组。返回内容开头: "{cleaned[:_SNIPPET_CHARS]}..."'
        )

    if end == -1 or end <= start:
        from_start = cleaned[start:]
        last_brace = from_start.rfind("}")
        if last_brace == -1:
            raise ResponseTruncatedError("AI 输出被截断且无法修复，请缩短文档或更换模型")
        logger.info(
            "Parser: truncated payload, synthesizing closing bracket",
            extra={"text_length": len(cleaned), "last_brace": start + last_brace},
        )
        return from_start[: last_brace + 1] + "]", True

    return cleaned[start : end + 1], False


def _repair(json_str: str, was_truncated: bool) -> str:
    fixed = json_str
    if was_truncated:
        # Descarta el último elemento (posiblemente incompleto).
        last_complete = fixed.rfind("},")
        if last_complete > 0:
            fixed = fixed[: last_complete + 1] + "]"
    return _TRAILING_COMMA_RE.sub(r"\1", fixed)


def _decode_error_message(error: Exception) -> str:
    # RecursionError: anidamiento excesivo, no tiene `.msg`.
    return getattr(error, "msg", None) or "嵌套层级过深"


def _decode(json_str: str, was_truncated: bool) -> Any:
    """
    Deserializa con un único pase de reparación.

    Raises:
        ResponseTruncatedError: truncada y la reparación no alcanzó.
        ResponseFormatError: JSON inválido aun reparado.
    """
    try:
        return json.loads(json_str)
    except (json.JSONDecodeError, RecursionError) as first_error:
        try:
            return json.loads(_repair(json_str, was_truncated))
        except (json.JSONDecodeError, RecursionError):
            if was_truncated:
                raise ResponseTruncatedError(
                    "AI 输出被截断，修复后仍无法解析。请缩短文档或更换模型",
                    original_error=first_error,
                ) from first_error
            raise ResponseFormatError(
                f"JSON 解析失败: {_decode_error_message(first_error)}", original_error=first_error
            ) from first_error


def _to_suggestion(item: Any, index: int) -> Optional[Suggestion]:
    """Item decodificado -> Suggestion (o None si no cumple el mínimo)."""
    if not isinstance(item, dict):
        return None

    fields = {name: aliases.resolve(item) for name, aliases in FIELD_ALIASES.items()}

    original = fields["original"] or ""
    suggestion = fields["suggestion"] or ""
    if not original and not suggestion:
        return None

    offset = int(fields["offset"]) if fields["offset"] is not None else -1
    length = int(fields["length"]) if fields["length"] is not None else len(original)

    return Suggestion(
        id=f"suggestion-{index}-{offset}",
        offset=offset,
        length=length,
        type=SuggestionType.coerce(fields["type"]),
        original=original,
        suggestion=suggestion,
        reason=fields["reason"] or "",
        rule_category=fields["ruleCategory"] or "",
    )


# -----------------------------------------------------------------------------
# API pública
# -----------------------------------------------------------------------------


def parse_review_response(
    text: str, reference_text: Optional[str] = None
) -> ParseResult:
    """
    Parsea UNA respuesta del modelo.

    Args:
        text: respuesta cruda.
        reference_text: si se pasa, las sugerencias se anclan contra este texto
            (coordenadas locales del chunk).
    """
    raw_response = text

    if not text or not text.strip():
        return ParseResult(suggestions=[], raw_response=raw_response, parse_error=EMPTY_CONTENT_MESSAGE)

    try:
        json_str, was_truncated = _extract_payload(text.strip())
        parsed = _decode(json_str, was_truncated)
        if not isinstance(parsed, list):
            raise ResponseSchemaError(f"解析结果不是数组，类型为: {_js_typeof(parsed)}")
    except (ResponseFormatError, ResponseSchemaError) as exc:
        logger.warning(
            "Parser: unusable model response",
            extra={"error_code": exc.error_code, "text_length": len(text)},
        )
        return ParseResult(suggestions=[], raw_response=raw_response, parse_error=exc.message)

    if not parsed:
        return ParseResult(suggestions=[], raw_response=raw_response, parse_error=None)

    suggestions = [
        s for s in (_to_suggestion(item, i) for i, item in enumerate(parsed)) if s is not None
    ]

    if reference_text:
        anchor_suggestions(reference_text, suggestions)

    parse_error: Optional[str] = None
    skipped = len(parsed) - len(suggestions)
    if skipped > 0:
        parse_error = f"{len(parsed)} 条结果中有 {skipped} 条格式不符被跳过"
        logger.info(
            "Parser: skipped malformed items",
            extra={"parsed": len(parsed), "skipped": skipped},
        )

    return ParseResult(suggestions=suggestions, raw_response=raw_response, parse_error=parse_error)

