"""Raw CMS entry → content model mapping.

Pure functions: each takes a raw entry (``{"sys": {...}, "fields": {...}}``)
and returns a model, or None when the entry lacks a required field. Every
text field goes through the field normalizer.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from spawnsmart.cms.fields import (
    extract_bool,
    extract_image_url,
    extract_int,
    extract_link_id,
    extract_link_ids,
    extract_list,
    extract_mapping,
    extract_text,
)
from spawnsmart.schemas.content import (
    DIFFICULTIES,
    SPORE_TYPES,
    SUPPLIER_TYPES,
    ComponentContent,
    Difficulty,
    EducationalItem,
    FAQItem,
    Product,
    SporeType,
    SporeVariety,
    Supplier,
)

logger = logging.getLogger(__name__)

_SUPPLIER_TYPE_ALIASES = {"spore": "spores", "tools": "accessories", "accessory": "accessories"}
_DIFFICULTY_ALIASES = {"easy": "beginner", "novice": "beginner", "medium": "intermediate",
                       "hard": "advanced", "expert": "advanced"}

_BEGINNER_VARIETIES = {"golden teacher", "b+", "cambodian", "z-strain", "ecuador"}
_ADVANCED_VARIETIES = {"penis envy", "albino penis envy", "enigma", "tidal wave"}
_GOURMET_NAMES = ("oyster", "lion's mane", "shiitake", "enoki", "maitake", "pioppino")
_MEDICINAL_NAMES = ("reishi", "cordyceps", "turkey tail", "chaga")

COLONIZATION_TIMES: dict[str, str] = {
    "beginner": "10-14 days",
    "intermediate": "14-21 days",
    "advanced": "21-30 days",
}

# "Psilocybe cubensis", "Hericium erinaceus"
_BINOMIAL = re.compile(r"^[A-Z][a-z]+ [a-z][a-z-]+$")

# Sub-objects of a componentContent entry that merge into the field map
_COMPONENT_SUB_OBJECTS = ("labels", "buttons", "alerts", "placeholders")


def entry_id(entry: dict[str, Any]) -> str:
    sys = entry.get("sys")
    if isinstance(sys, dict) and isinstance(sys.get("id"), str):
        return sys["id"]
    return ""


def entry_fields(entry: dict[str, Any]) -> dict[str, Any]:
    fields = entry.get("fields")
    return fields if isinstance(fields, dict) else {}


# ----------------------------------------------------------------------
# Inference helpers (shared with the local spore dataset)
# ----------------------------------------------------------------------


def infer_spore_type(mushroom_type: str, name: str = "") -> SporeType:
    """Classify a variety from its mushroom type label, then from its name."""
    label = mushroom_type.strip().lower()
    if label in SPORE_TYPES:
        return label  # type: ignore[return-value]
    for spore_type in ("cyanescens", "gourmet", "medicinal", "cubensis"):
        if spore_type in label:
            return spore_type  # type: ignore[return-value]

    lowered = name.lower()
    if any(n in lowered for n in _MEDICINAL_NAMES):
        return "medicinal"
    if any(n in lowered for n in _GOURMET_NAMES):
        return "gourmet"
    return "other"


def infer_difficulty(explicit: str, growing_conditions: str = "", name: str = "") -> Difficulty:
    """Use an explicit difficulty when valid, else read it from the growing conditions."""
    value = explicit.strip().lower()
    value = _DIFFICULTY_ALIASES.get(value, value)
    if value in DIFFICULTIES:
        return value  # type: ignore[return-value]

    conditions = growing_conditions.lower()
    if conditions:
        if "beginner" in conditions:
            return "beginner"
        if "advanced" in conditions or "challenging" in conditions:
            return "advanced"
        return "intermediate"

    lowered = name.strip().lower()
    if lowered in _BEGINNER_VARIETIES:
        return "beginner"
    if lowered in _ADVANCED_VARIETIES:
        return "advanced"
    return "intermediate"


def describe_spore(name: str, difficulty: str, spore_type: str,
                   growing_conditions: str = "", store: str = "") -> str:
    """Generated description for varieties that have none."""
    parts = [f"{name or 'This mushroom'} is a {difficulty} level {spore_type} variety."]
    if growing_conditions:
        parts.append(growing_conditions)
    if store:
        # Store names may end in an abbreviation ("Co.").
        parts.append(f"Available from {store.rstrip('.')}.")
    return " ".join(parts)


# ----------------------------------------------------------------------
# Entry mappers
# ----------------------------------------------------------------------


def map_supplier(entry: dict[str, Any]) -> Supplier | None:
    fields = entry_fields(entry)
    sys_id = entry_id(entry)
    name = extract_text(fields.get("name")).strip()
    supplier_id = extract_text(fields.get("id")).strip() or sys_id
    raw_type = extract_text(fields.get("type")).strip().lower()
    supplier_type = _SUPPLIER_TYPE_ALIASES.get(raw_type, raw_type)

    if not name or not supplier_id:
        logger.warning("Skipping supplier entry %s without a name or id", sys_id or "?")
        return None
    if supplier_type not in SUPPLIER_TYPES:
        logger.warning("Skipping supplier %s with unknown type %r", supplier_id, raw_type)
        return None

    return Supplier(
        id=supplier_id,
        entry_id=sys_id,
        name=name,
        description=extract_text(fields.get("description")),
        url=extract_text(fields.get("url")),
        featured=extract_bool(fields.get("featured")),
        referral_code=extract_text(fields.get("referralCode")),
        type=supplier_type,
    )


def map_product(entry: dict[str, Any]) -> tuple[Product, str | None] | None:
    """Return the product and the id its supplier link points at."""
    fields = entry_fields(entry)
    name = extract_text(fields.get("name")).strip()
    if not name:
        logger.warning("Skipping product entry %s without a name", entry_id(entry) or "?")
        return None
    product = Product(
        name=name,
        description=extract_text(fields.get("description")),
        price=extract_text(fields.get("price")),
        url=extract_text(fields.get("url")),
    )
    return product, extract_link_id(fields.get("supplier"))


def map_spore(entry: dict[str, Any], suppliers: dict[str, Supplier]) -> SporeVariety | None:
    """Map a spore entry; ``suppliers`` is keyed by entry id and supplier id."""
    fields = entry_fields(entry)
    sys_id = entry_id(entry)
    text = {key: extract_text(value).strip() for key, value in fields.items()}

    name = text.get("subtype") or text.get("name") or text.get("sporeName", "")
    if not name:
        logger.warning("Skipping spore entry %s without a name", sys_id or "?")
        return None

    mushroom_type = text.get("mushroomType") or text.get("type", "")
    spore_type = infer_spore_type(mushroom_type, name)
    growing_conditions = text.get("growingConditions", "")
    difficulty = infer_difficulty(text.get("difficulty", ""), growing_conditions, name)

    scientific_name = text.get("scientificName", "")
    if not scientific_name and _BINOMIAL.match(mushroom_type):
        scientific_name = mushroom_type

    supplier_ids: list[str] = []
    supplier_names: list[str] = []
    refs = extract_link_ids(fields.get("store")) + extract_link_ids(fields.get("suppliers"))
    for ref in refs:
        supplier = suppliers.get(ref)
        if supplier is None:
            logger.debug("Spore %s links to unknown supplier %s — dropped", name, ref)
            continue
        if supplier.id not in supplier_ids:
            supplier_ids.append(supplier.id)
            supplier_names.append(supplier.name)

    return SporeVariety(
        id=sys_id or text.get("id") or name.lower().replace(" ", "-"),
        name=name,
        scientific_name=scientific_name,
        type=spore_type,
        difficulty=difficulty,
        colonization_time=text.get("colonizationTime") or COLONIZATION_TIMES[difficulty],
        description=text.get("description") or describe_spore(
            name, difficulty, spore_type, growing_conditions,
            supplier_names[0] if supplier_names else "",
        ),
        appearance=text.get("appearance", ""),
        growing_conditions=growing_conditions,
        price=text.get("price") or "Price not available",
        url=text.get("url", ""),
        image_url=extract_image_url(fields.get("image")),
        supplier_ids=supplier_ids,
        supplier_names=supplier_names,
        strength=text.get("strength", ""),
        mood_effects=text.get("moodEffects", ""),
        medicinal_benefits=text.get("medicinalBenefits", ""),
        culinary_uses=text.get("culinaryUses", ""),
    )


def map_educational(entry: dict[str, Any]) -> EducationalItem | None:
    fields = entry_fields(entry)
    title = extract_text(fields.get("title")).strip()
    if not title:
        logger.warning("Skipping educational entry %s without a title", entry_id(entry) or "?")
        return None
    return EducationalItem(
        title=title,
        description=extract_text(fields.get("description")),
        body=extract_text(fields.get("content")),
        category=extract_text(fields.get("category")).strip() or "basics",
        tags=extract_list(fields.get("tags")),
    )


def map_faq(entry: dict[str, Any]) -> FAQItem | None:
    fields = entry_fields(entry)
    question = extract_text(fields.get("question")).strip()
    if not question:
        logger.warning("Skipping FAQ entry %s without a question", entry_id(entry) or "?")
        return None
    return FAQItem(
        question=question,
        answer=extract_text(fields.get("answer")),
        category=extract_text(fields.get("category")).strip() or "general",
        order=extract_int(fields.get("order")),
    )


def map_fact(entry: dict[str, Any]) -> str:
    return extract_text(entry_fields(entry).get("fact")).strip()


def merge_component_entry(components: dict[str, ComponentContent], entry: dict[str, Any]) -> None:
    """Fold one componentContent entry into ``components``.

    ``componentId`` is either ``"component.field"`` (one field, its text in
    ``labels.value``) or a bare component name whose title, description and
    labels/buttons/alerts/placeholders sub-objects merge into one field map.
    """
    fields = entry_fields(entry)
    component_id = extract_text(fields.get("componentId")).strip()
    if not component_id:
        logger.warning("Skipping component entry %s without a componentId", entry_id(entry) or "?")
        return

    if "." in component_id:
        component, key = component_id.split(".", 1)
        labels = extract_mapping(fields.get("labels"))
        value = labels.get("value") or extract_text(fields.get("title"))
        components.setdefault(component, {})[key] = value
        return

    target = components.setdefault(component_id, {})
    for key in ("title", "description"):
        value = extract_text(fields.get(key))
        if value:
            target[key] = value
    for sub in _COMPONENT_SUB_OBJECTS:
        target.update(extract_mapping(fields.get(sub)))
