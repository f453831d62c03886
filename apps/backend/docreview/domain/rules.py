"""
===============================================================================
TARJETA CRC — domain/rules.py
===============================================================================

Módulo:
    Catálogo de reglas de revisión, paquetes de escena y modelos disponibles

Responsabilidades:
    - Definir las reglas built-in (id, nombre, descripción, categoría, texto de prompt).
    - Definir los paquetes de escena (selección de reglas por tipo de documento).
    - Recomendar un paquete de escena por conteo de palabras clave.
    - Listar los modelos ofrecidos al cliente.

Colaboradores:
    - infrastructure/prompts/builder.py: arma el system prompt con las reglas.
    - application/usecases/review_document.py: valida ids de reglas.
    - interfaces/api/http/routers/rules.py: expone catálogo y detección.

Reglas:
    - Datos inmutables (tuplas + dataclasses frozen).
    - La pseudo-regla "custom" no está en el catálogo: se arma con customPrompt.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Final, Optional, Tuple

CUSTOM_RULE_ID: Final[str] = "custom"


class RuleCategory(str, Enum):
    BASIC = "basic"
    STYLE = "style"
    PROFESSIONAL = "professional"
    COMPLIANCE = "compliance"


CATEGORY_LABELS: Final[Dict[RuleCategory, str]] = {
    RuleCategory.BASIC: "基础规则",
    RuleCategory.STYLE: "风格优化",
    RuleCategory.PROFESSIONAL: "专业场景",
    RuleCategory.COMPLIANCE: "合规检查",
}


@dataclass(frozen=True)
class ReviewRuleTemplate:
    id: str
    name: str
    description: str
    category: RuleCategory
    prompt_text: str


@dataclass(frozen=True)
class ScenePack:
    id: str
    name: str
    description: str
    icon: str
    rule_ids: Tuple[str, ...]


@dataclass(frozen=True)
class AIModel:
    id: str
    name: str
    provider: str
    note: str = ""


# -----------------------------------------------------------------------------
# Catálogo
# -----------------------------------------------------------------------------

RULE_TEMPLATES: Final[Tuple[ReviewRuleTemplate, ...]] = (
    # basic
    ReviewRuleTemplate("typo", "错别字检查", "找出拼写错误和错别字", RuleCategory.BASIC,
                       "找出所有拼写错误和错别字，给出正确写法"),
    ReviewRuleTemplate("punctuation", "标点规范", "检查中英文标点使用规范", RuleCategory.BASIC,
                       "检查中英文标点符号使用是否规范，如中文环境使用全角标点、英文环境使用半角标点"),
    ReviewRuleTemplate("grammar", "语法检查", "检查病句、语序不当等语法问题", RuleCategory.BASIC,
                       "检查病句、主谓不一致、语序不当等语法问题"),
    ReviewRuleTemplate("logic", "逻辑审查", "检查逻辑不通、表达不清的地方", RuleCategory.BASIC,
                       "检查文档中逻辑不通、表达不清的地方，给出改进建议"),
    # style
    ReviewRuleTemplate("tone", "语气优化", "优化为更友好、专业的语气", RuleCategory.STYLE,
                       "将生硬的表达优化为更友好、专业的语气"),
    ReviewRuleTemplate("conciseness", "简洁优化", "删除冗余表达，让文档更简洁", RuleCategory.STYLE,
                       "删除冗余表达，让文档更简洁有力"),
    ReviewRuleTemplate("formality", "正式度调整", "调整口语化表达为书面语", RuleCategory.STYLE,
                       "将口语化、网络用语等非正式表达改为规范的书面语"),
    ReviewRuleTemplate("consistency", "术语一致性", "统一文档中术语、称谓的表达", RuleCategory.STYLE,
                       "检查并统一文档中术语、称谓、数字格式等的表达方式"),
    # professional
    ReviewRuleTemplate("academic_citation", "引用规范", "检查学术引用格式", RuleCategory.PROFESSIONAL,
                       "检查引用、参考文献格式是否符合学术规范"),
    ReviewRuleTemplate("technical_accuracy", "技术准确性", "检查技术术语和概念表述",
                       RuleCategory.PROFESSIONAL, "检查技术术语、概念、API 名称等表述是否准确"),
    ReviewRuleTemplate("data_consistency", "数据一致性", "检查数据、日期前后是否一致",
                       RuleCategory.PROFESSIONAL, "检查文档中的数据、日期、数字前后是否一致，有无矛盾"),
    ReviewRuleTemplate("marketing_appeal", "营销感染力", "增强文案的吸引力和说服力",
                       RuleCategory.PROFESSIONAL, "优化文案的吸引力、感染力和说服力，但不夸大事实"),
    # compliance
    ReviewRuleTemplate("sensitive_words", "敏感词检查", "检查政治、宗教等敏感表达",
                       RuleCategory.COMPLIANCE, "检查文档中是否包含政治敏感、宗教、歧视等不当表达"),
    ReviewRuleTemplate("official_standard", "公文规范", "符合公文、政务文件规范",
                       RuleCategory.COMPLIANCE, "检查是否符合公文写作规范，如称谓、格式、用语等"),
    ReviewRuleTemplate("legal_risk", "法律风险", "识别可能的法律风险表述", RuleCategory.COMPLIANCE,
                       "识别可能引发法律纠纷的表述，如虚假承诺、侵权内容等"),
)

SCENE_PACKS: Final[Tuple[ScenePack, ...]] = (
    ScenePack("daily", "日常通用", "适合日常邮件、报告、总结等通用文档", "📝",
              ("typo", "punctuation", "grammar", "logic", "conciseness")),
    ScenePack("official", "公文政务", "适合政府公文、政务报告、正式通知", "🏛️",
              ("typo", "grammar", "official_standard", "sensitive_words", "formality")),
    ScenePack("academic", "学术论文", "适合学术论文、研究报告、文献综述", "🎓",
              ("typo", "grammar", "logic", "academic_citation", "consistency")),
    ScenePack("technical", "技术文档", "适合技术文档、API 文档、开发手册", "💻",
              ("typo", "technical_accuracy", "data_consistency", "conciseness", "consistency")),
    ScenePack("marketing", "营销文案", "适合广告文案、产品介绍、宣传材料", "📢",
              ("typo", "grammar", "marketing_appeal", "tone", "legal_risk")),
)

AI_MODELS: Final[Tuple[AIModel, ...]] = (
    AIModel("anthropic/claude-sonnet-4", "Claude Sonnet 4", "claude", "推荐，稳定快速"),
    AIModel("google/gemini-2.5-flash", "Gemini 2.5 Flash", "google", "快速便宜"),
    AIModel("moonshotai/kimi-k2.5", "Kimi K2.5", "kimi", "思维链模型，响应较慢"),
)

_RULES_BY_ID: Final[Dict[str, ReviewRuleTemplate]] = {r.id: r for r in RULE_TEMPLATES}
_PACKS_BY_ID: Final[Dict[str, ScenePack]] = {p.id: p for p in SCENE_PACKS}


def get_rule_template(rule_id: str) -> Optional[ReviewRuleTemplate]:
    return _RULES_BY_ID.get(rule_id)


def get_scene_pack(pack_id: str) -> Optional[ScenePack]:
    return _PACKS_BY_ID.get(pack_id)


def get_rules_by_category(category: RuleCategory) -> Tuple[ReviewRuleTemplate, ...]:
    return tuple(r for r in RULE_TEMPLATES if r.category is category)


def is_known_rule(rule_id: str) -> bool:
    return rule_id == CUSTOM_RULE_ID or rule_id in _RULES_BY_ID


# -----------------------------------------------------------------------------
# Detección de escena
# -----------------------------------------------------------------------------

DETECTION_SAMPLE_CHARS: Final[int] = 2000


@dataclass(frozen=True)
class _DetectionRule:
    scene_pack_id: str
    keywords: Tuple[str, ...]
    threshold: int = 2


_DETECTION_RULES: Final[Tuple[_DetectionRule, ...]] = (
    _DetectionRule("official", ("尊敬的", "通知", "关于", "批复", "决定", "印发", "各部门", "各单位", "文件")),
    _DetectionRule(
        "academic",
        ("摘要", "参考文献", "引用", "Abstract", "论文", "研究", "文献", "假设", "结论", "实验"),
    ),
    _DetectionRule(
        "technical",
        ("```", "API", "函数", "接口", "import ", "class ", "const ", "function ", "代码"),
    ),
    _DetectionRule("marketing", ("立即", "限时", "优惠", "购买", "活动", "抢购", "折扣", "免费", "特价")),
)


def detect_scene_pack(text: str) -> Optional[ScenePack]:
    """
    Recomienda un paquete de escena según palabras clave.

    - Solo mira los primeros 2000 caracteres.
    - Cada keyword cuenta una vez (presencia, no frecuencia).
    - Gana el mayor conteo que alcance el umbral; empate -> el primero declarado.
    - None: sin recomendación (el cliente usa "daily").
    """
    sample = text[:DETECTION_SAMPLE_CHARS]

    best_id: Optional[str] = None
    best_count = 0
    for rule in _DETECTION_RULES:
        count = sum(1 for kw in rule.keywords if kw in sample)
        if count >= rule.threshold and count > best_count:
            best_id, best_count = rule.scene_pack_id, count

    return get_scene_pack(best_id) if best_id else None
