"""Content resolver — loads every content category once and serves it from memory.

Load sequence (one isolated step per category, run in order):

    suppliers → products (joined to suppliers) → spores → educational
    → faqs → facts → components

A step that fails or raises leaves its collection at the default value and
is recorded in the load report; later steps still run. Spores degrade in two
levels: CMS entries, then the bundled local dataset, then an empty list.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable, Iterable, TypeVar

from pydantic import BaseModel, Field

from spawnsmart.cms.transport import ContentfulTransport, FetchResult
from spawnsmart.content.fallbacks import STATIC_FACTS, default_component_content
from spawnsmart.content.local_spores import load_local_spores
from spawnsmart.content.mapping import (
    map_educational,
    map_fact,
    map_faq,
    map_product,
    map_spore,
    map_supplier,
    merge_component_entry,
)
from spawnsmart.schemas.content import (
    CategoryLoad,
    ComponentContent,
    EducationalItem,
    FAQItem,
    LoadReport,
    SporeVariety,
    Supplier,
)

logger = logging.getLogger(__name__)

# CMS content type ids
CONTENT_TYPES: dict[str, str] = {
    "suppliers": "supplier",
    "products": "product",
    "spores": "spore",
    "educational": "educationalContent",
    "faqs": "faq",
    "facts": "mushroomFact",
    "components": "componentContent",
}

LOAD_STEPS: tuple[str, ...] = tuple(CONTENT_TYPES)

# on_step(step, None) when a step starts; on_step(step, outcome) when it ends
StepCallback = Callable[[str, CategoryLoad | None], None]


class _ContentState(BaseModel):
    suppliers: list[Supplier] = []
    spores: list[SporeVariety] = []
    educational: dict[str, list[EducationalItem]] = {}
    faqs: dict[str, list[FAQItem]] = {}
    facts: list[str] = Field(default_factory=lambda: list(STATIC_FACTS))
    components: dict[str, ComponentContent] = {}


def _outcome(result: FetchResult, count: int) -> CategoryLoad:
    if result.failed:
        return CategoryLoad(status="failed", error=result.error or "")
    return CategoryLoad(status="loaded" if count else "empty", count=count)


_M = TypeVar("_M", bound=BaseModel)


def _copies(items: Iterable[_M]) -> list[_M]:
    """Deep copies, so callers cannot change the loaded content."""
    return [item.model_copy(deep=True) for item in items]


class ContentResolver:
    """Serves suppliers, spores, educational content, FAQs, facts and UI copy.

    Every getter awaits :meth:`ensure_loaded` and then filters in memory; the
    CMS is read once per load, never per call. Use :meth:`reload` to pick up
    CMS changes in a running process.
    """

    def __init__(
        self,
        transport: ContentfulTransport,
        *,
        local_spores: Callable[[], list[SporeVariety]] = load_local_spores,
        rng: random.Random | None = None,
        on_step: StepCallback | None = None,
    ) -> None:
        self.transport = transport
        self._local_spores = local_spores
        self._rng = rng or random.Random()
        self.on_step = on_step
        self._state = _ContentState()
        self._report = LoadReport()
        self._loaded = False
        self._pending: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def load_report(self) -> LoadReport:
        return self._report.model_copy(deep=True)

    async def ensure_loaded(self) -> None:
        """Run the load sequence once; concurrent callers share the same load."""
        if self._loaded:
            return
        if self._pending is None:
            self._pending = asyncio.create_task(self._load())
        pending = self._pending
        try:
            # A cancelled caller must not cancel the shared load.
            await asyncio.shield(pending)
        finally:
            if pending.done() and self._pending is pending and not self._loaded:
                self._pending = None

    async def reload(self) -> LoadReport:
        """Discard the loaded content and run the load sequence again."""
        if self._pending is not None and not self._pending.done():
            await asyncio.shield(self._pending)
        self._loaded = False
        self._pending = None
        await self.ensure_loaded()
        return self.load_report

    async def _load(self) -> None:
        state = _ContentState()
        report = LoadReport()
        steps: dict[str, Callable[[_ContentState], Awaitable[CategoryLoad]]] = {
            "suppliers": self._load_suppliers,
            "products": self._load_products,
            "spores": self._load_spores,
            "educational": self._load_educational,
            "faqs": self._load_faqs,
            "facts": self._load_facts,
            "components": self._load_components,
        }
        logger.info("Loading content from Contentful")
        for name, step in steps.items():
            self._notify(name, None)
            try:
                outcome = await step(state)
            except Exception as exc:
                logger.exception("Loading %s failed", name)
                outcome = CategoryLoad(status="failed", error=f"{type(exc).__name__}: {exc}")
            setattr(report, name, outcome)
            self._notify(name, outcome)
            logger.debug("Loaded %s: %s (%d)", name, outcome.status, outcome.count)

        self._state = state
        self._report = report
        self._loaded = True
        logger.info(
            "Content loaded: %d suppliers, %d spores, %d educational categories, %d FAQ categories",
            len(state.suppliers), len(state.spores), len(state.educational), len(state.faqs),
        )

    def _notify(self, step: str, outcome: CategoryLoad | None) -> None:
        if self.on_step is None:
            return
        try:
            self.on_step(step, outcome)
        except Exception:
            logger.warning("Load step callback failed for %s", step, exc_info=True)

    async def _load_suppliers(self, state: _ContentState) -> CategoryLoad:
        result = await self.transport.fetch(CONTENT_TYPES["suppliers"])
        suppliers = [s for s in map(map_supplier, result.entries) if s is not None]
        state.suppliers = suppliers
        return _outcome(result, len(suppliers))

    async def _load_products(self, state: _ContentState) -> CategoryLoad:
        result = await self.transport.fetch(CONTENT_TYPES["products"])
        by_ref = self._supplier_index(state.suppliers)
        joined = 0
        for entry in result.entries:
            mapped = map_product(entry)
            if mapped is None:
                continue
            product, ref = mapped
            supplier = by_ref.get(ref) if ref else None
            if supplier is None:
                logger.debug("Dropping product %s: no supplier for link %s", product.name, ref)
                continue
            supplier.products.append(product.model_copy(update={"supplier_id": supplier.id}))
            joined += 1
        return _outcome(result, joined)

    async def _load_spores(self, state: _ContentState) -> CategoryLoad:
        result = await self.transport.fetch(CONTENT_TYPES["spores"])
        by_ref = self._supplier_index(state.suppliers)
        spores = [s for s in (map_spore(e, by_ref) for e in result.entries) if s is not None]
        if spores:
            state.spores = spores
            return _outcome(result, len(spores))

        # Intentional degradation: no CMS spores, serve the bundled dataset.
        local = self._local_spores()
        state.spores = local
        if local:
            logger.info("No spore entries in Contentful; using %d local varieties", len(local))
            return CategoryLoad(status="fallback", count=len(local), error=result.error or "")
        logger.warning("No spore data available from Contentful or the local dataset")
        return _outcome(result, 0)

    async def _load_educational(self, state: _ContentState) -> CategoryLoad:
        result = await self.transport.fetch(CONTENT_TYPES["educational"])
        grouped: dict[str, list[EducationalItem]] = {}
        count = 0
        for item in map(map_educational, result.entries):
            if item is not None:
                grouped.setdefault(item.category, []).append(item)
                count += 1
        state.educational = grouped
        return _outcome(result, count)

    async def _load_faqs(self, state: _ContentState) -> CategoryLoad:
        result = await self.transport.fetch(CONTENT_TYPES["faqs"])
        grouped: dict[str, list[FAQItem]] = {}
        for item in map(map_faq, result.entries):
            if item is not None:
                grouped.setdefault(item.category, []).append(item)
        count = 0
        for category, items in grouped.items():
            items.sort(key=lambda faq: (faq.order, faq.question))
            grouped[category] = [
                faq.model_copy(update={"order": position})
                for position, faq in enumerate(items, start=1)
            ]
            count += len(items)
        state.faqs = grouped
        return _outcome(result, count)

    async def _load_facts(self, state: _ContentState) -> CategoryLoad:
        result = await self.transport.fetch(CONTENT_TYPES["facts"])
        facts = [f for f in map(map_fact, result.entries) if f]
        if facts:
            state.facts = facts
            return _outcome(result, len(facts))
        logger.info("No mushroom facts in Contentful; using %d built-in facts", len(STATIC_FACTS))
        state.facts = list(STATIC_FACTS)
        return CategoryLoad(status="fallback", count=len(STATIC_FACTS), error=result.error or "")

    async def _load_components(self, state: _ContentState) -> CategoryLoad:
        result = await self.transport.fetch(CONTENT_TYPES["components"])
        components: dict[str, ComponentContent] = {}
        for entry in result.entries:
            merge_component_entry(components, entry)
        state.components = components
        if not components:
            return CategoryLoad(status="fallback", error=result.error or "")
        return _outcome(result, len(components))

    @staticmethod
    def _supplier_index(suppliers: list[Supplier]) -> dict[str, Supplier]:
        """Index suppliers by supplier id and by CMS entry id (entry id wins)."""
        index = {s.id: s for s in suppliers}
        index.update({s.entry_id: s for s in suppliers if s.entry_id})
        return index

    # ------------------------------------------------------------------
    # Suppliers
    # ------------------------------------------------------------------

    async def get_all_suppliers(self) -> list[Supplier]:
        await self.ensure_loaded()
        return _copies(self._state.suppliers)

    async def get_featured_suppliers(self) -> list[Supplier]:
        await self.ensure_loaded()
        return _copies(s for s in self._state.suppliers if s.featured)

    async def get_all_suppliers_by_type(self, supplier_type: str) -> list[Supplier]:
        await self.ensure_loaded()
        return _copies(s for s in self._state.suppliers if s.type == supplier_type)

    async def get_featured_suppliers_by_type(self, supplier_type: str) -> list[Supplier]:
        await self.ensure_loaded()
        return _copies(s for s in self._state.suppliers if s.featured and s.type == supplier_type)

    async def get_supplier_by_id(self, supplier_id: str) -> Supplier | None:
        await self.ensure_loaded()
        supplier = next((s for s in self._state.suppliers if s.id == supplier_id), None)
        return supplier.model_copy(deep=True) if supplier is not None else None

    async def track_supplier_click(self, supplier_id: str) -> bool:
        """Log a click on a supplier link. Returns False for unknown suppliers."""
        supplier = await self.get_supplier_by_id(supplier_id)
        if supplier is None:
            logger.debug("Ignoring click on unknown supplier %s", supplier_id)
            return False
        logger.info(
            "User clicked supplier link: %s (%s, referral=%s)",
            supplier.name, supplier.id, bool(supplier.referral_code),
        )
        return True

    # ------------------------------------------------------------------
    # Spores
    # ------------------------------------------------------------------

    async def get_all_spore_data(self) -> list[SporeVariety]:
        await self.ensure_loaded()
        return _copies(self._state.spores)

    async def get_spores_by_type(self, spore_type: str) -> list[SporeVariety]:
        await self.ensure_loaded()
        return _copies(s for s in self._state.spores if s.type == spore_type)

    async def search_spores(self, term: str = "", spore_type: str = "all") -> list[SporeVariety]:
        """Case-insensitive match on name or description, optionally by type."""
        await self.ensure_loaded()
        needle = term.strip().lower()
        return _copies(
            s for s in self._state.spores
            if (spore_type == "all" or s.type == spore_type)
            and (needle in s.name.lower() or needle in s.description.lower())
        )

    # ------------------------------------------------------------------
    # Educational content and FAQs
    # ------------------------------------------------------------------

    async def get_educational_content(self, category: str) -> list[EducationalItem]:
        await self.ensure_loaded()
        return _copies(self._state.educational.get(category, []))

    async def get_educational_categories(self) -> list[str]:
        await self.ensure_loaded()
        return list(self._state.educational)

    async def get_faqs(self, category: str | None = None) -> list[FAQItem]:
        await self.ensure_loaded()
        if category is not None:
            return _copies(self._state.faqs.get(category, []))
        return _copies(faq for items in self._state.faqs.values() for faq in items)

    # ------------------------------------------------------------------
    # Facts and UI copy
    # ------------------------------------------------------------------

    async def get_random_static_fact(self) -> str:
        await self.ensure_loaded()
        return self._rng.choice(self._state.facts or list(STATIC_FACTS))

    async def get_component_content(self, name: str) -> ComponentContent:
        """UI copy for ``name``: the CMS map when present, else the built-in default."""
        await self.ensure_loaded()
        if name in self._state.components:
            return dict(self._state.components[name])
        return default_component_content(name)
