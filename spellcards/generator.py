"""PDF generation orchestrator for spell cards."""
from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import List, Optional, Sequence, Union

from reportlab.lib.units import mm

from . import fonts
from .constants import GRID_COLUMNS, GRID_ROWS, PAGE_SIZE
from .draw import PdfBackend, draw_pages
from .pages import Page, PageComposer
from .selector import Selection, Unrenderable, select
from .spell import MalformedRecord
from .store import SpellStore
from .text_utils import MeasurementUnavailable, TextMeasurer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rejected:
    """Spell that could not be rendered at all (unknown, malformed, unmeasurable)."""
    identifier: str
    reason: str


@dataclass
class BatchResult:
    pages: List[Page] = field(default_factory=list)
    unrenderable: List[Unrenderable] = field(default_factory=list)
    rejected: List[Rejected] = field(default_factory=list)

    @property
    def cards(self) -> int:
        return sum(len(page.cards) for page in self.pages)


def prepare_card(identifier: str, store: SpellStore, measurer) -> Union[Selection, Unrenderable, Rejected]:
    """Resolve and lay out a single spell. Per-spell failures become Rejected."""
    try:
        record = store.resolve(identifier)
        return select(record, measurer)
    except (KeyError, MalformedRecord, MeasurementUnavailable) as exc:
        reason = exc.args[0] if exc.args else repr(exc)
        return Rejected(identifier, str(reason))


def render_batch(
    identifiers: Sequence[str],
    store: SpellStore,
    measurer=None,
    workers: int = 1,
    composer: Optional[PageComposer] = None,
) -> BatchResult:
    """Lay out every requested spell and pack the cards in request order.

    Layouts may be computed on several threads; results are folded into the
    composer in the order the identifiers were given.
    """
    measurer = measurer or TextMeasurer()
    composer = composer or PageComposer()
    worker = partial(prepare_card, store=store, measurer=measurer)

    if workers <= 1:
        outcomes = [worker(identifier) for identifier in identifiers]
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(executor.map(worker, identifiers))

    result = BatchResult()
    for identifier, outcome in zip(identifiers, outcomes):
        if isinstance(outcome, Selection):
            composer.add_card(outcome.format, outcome.layout, key=identifier)
            logger.debug("%s: %s card", identifier, outcome.format.name.lower())
        elif isinstance(outcome, Unrenderable):
            result.unrenderable.append(outcome)
            logger.debug("%s: no card format fits", identifier)
        else:
            result.rejected.append(outcome)
            logger.debug("%s: rejected", identifier)
    result.pages = composer.finish()
    return result


def main(
    spells_path: str,
    identifiers: Sequence[str],
    output_pdf_path: Optional[str] = None,
    workers: int = 1,
    columns: int = GRID_COLUMNS,
    rows: int = GRID_ROWS,
    unicode_fonts: bool = True,
) -> BatchResult:
    # Fonts must be settled before anything is measured
    if unicode_fonts:
        fonts.setup_unicode_fonts()
    else:
        fonts.use_builtin_fonts()
    store = SpellStore.from_json(spells_path)
    logger.info("Loaded %d spells; rendering %d requested card(s)...", len(store), len(identifiers))

    composer = PageComposer(columns=columns, rows=rows, page_size=PAGE_SIZE)
    result = render_batch(identifiers, store, TextMeasurer(), workers=workers, composer=composer)

    if result.pages:
        # If output path not provided, create a default path under ./output using the spell file name
        if not output_pdf_path:
            output_dir = Path("output")
            output_dir.mkdir(parents=True, exist_ok=True)
            output_pdf_path = output_dir / f"{Path(spells_path).stem}.pdf"
        backend = PdfBackend(output_pdf_path, page_size=PAGE_SIZE)
        draw_pages(backend, result.pages)
        backend.save()
    else:
        logger.warning("No cards to compose into PDF.")

    logger.info(
        "🎉 PDF generation complete!\n\n"
        "📥 Input: %s\n"
        "📤 Output: %s\n"
        "🧾 Cards: %d\n"
        "📄 Pages: %d",
        spells_path,
        output_pdf_path if result.pages else "-",
        result.cards,
        len(result.pages),
    )

    if result.unrenderable:
        logger.warning("%d spell(s) did not fit any card format and need manual follow-up:", len(result.unrenderable))
        for item in result.unrenderable:
            logger.warning("  %s (%s): %.1f mm too tall", item.identifier, item.name, item.excess / mm)
    if result.rejected:
        logger.warning("%d spell(s) were rejected:", len(result.rejected))
        for item in result.rejected:
            logger.warning("  %s: %s", item.identifier, item.reason)
    return result
