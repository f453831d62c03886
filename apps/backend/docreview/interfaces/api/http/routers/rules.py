"""
===============================================================================
TARJETA CRC — docreview/interfaces/api/http/routers/rules.py
===============================================================================

Name:
    Rules Router

Responsibilities:
    - Exponer el catálogo de reglas, escenas y modelos disponibles.
    - Recomendar una escena a partir del texto (detección por keywords).

Collaborators:
    - domain.rules
    - crosscutting.config (modelo por defecto)
    - schemas.review
===============================================================================
"""

from __future__ import annotations

from docreview.crosscutting.config import get_settings
from docreview.domain.rules import (
    AI_MODELS,
    CATEGORY_LABELS,
    RULE_TEMPLATES,
    SCENE_PACKS,
    detect_scene_pack,
)
from fastapi import APIRouter

from ..schemas.review import (
    DetectSceneReq,
    DetectSceneRes,
    ModelRes,
    RuleRes,
    RulesCatalogRes,
    ScenePackRes,
)

router = APIRouter()


@router.get("/rules", response_model=RulesCatalogRes, tags=["rules"])
def list_rules():
    return RulesCatalogRes(
        rules=[
            RuleRes(
                id=r.id,
                name=r.name,
                description=r.description,
                category=r.category.value,
                prompt_text=r.prompt_text,
            )
            for r in RULE_TEMPLATES
        ],
        scene_packs=[
            ScenePackRes(
                id=p.id,
                name=p.name,
                description=p.description,
                icon=p.icon,
                rule_ids=list(p.rule_ids),
            )
            for p in SCENE_PACKS
        ],
        category_labels={c.value: label for c, label in CATEGORY_LABELS.items()},
        models=[
            ModelRes(id=m.id, name=m.name, provider=m.provider, note=m.note)
            for m in AI_MODELS
        ],
        default_model=get_settings().default_model,
    )


@router.post("/rules/detect", response_model=DetectSceneRes, tags=["rules"])
def detect_scene(req: DetectSceneReq):
    pack = detect_scene_pack(req.text)
    return DetectSceneRes(scene_pack_id=pack.id if pack else None)
