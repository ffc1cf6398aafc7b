"""
Data store for the menu catalogue.

``CatalogStore`` owns the categorized listings for the lifetime of the
process. It is the single authority on what the menu contains: the
snapshot file is only a best-effort copy, rewritten in full after every
insert or delete and read back once at start-up. A failed write is
logged and never rolls back the in-memory change; the next successful
write brings the file back in line.

Listings removed from the catalogue also take their uploaded image with
them when the image lives in the asset manager's directory. That cleanup
is best-effort as well: a missing or undeletable file never prevents a
listing from being deleted.
"""

from __future__ import annotations

import json
import logging
import math
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError as SchemaError

from ..errors import CatalogError, NotFoundError, PersistenceError, ValidationError
from ..storage import AssetManager
from .schemas import Catalog, Listing


logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = ("freshporkcuts", "processedPork", "internationalPork")


def _now_iso() -> str:
    """UTC timestamp with millisecond precision, e.g. ``2024-05-01T09:30:00.123Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_price(price: Any) -> float:
    """Parse ``price`` as a finite, non-negative number.

    Strings such as ``"12.50"`` are accepted. Booleans are rejected even
    though Python treats them as integers.
    """
    if _is_blank(price) or isinstance(price, bool):
        raise ValidationError("All fields are required")
    try:
        value = float(str(price).strip()) if isinstance(price, str) else float(price)
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number")
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise ValidationError("Price must be a non-negative number")
    return value


class CatalogStore:
    def __init__(
        self,
        snapshot_path: Path,
        assets: Optional[AssetManager] = None,
        categories: Iterable[str] = DEFAULT_CATEGORIES,
    ):
        self.snapshot_path = Path(snapshot_path)
        self.assets = assets
        self.default_categories = tuple(categories)
        self._catalog: Catalog = self._empty_catalog()
        self._last_id = 0

    def _empty_catalog(self) -> Catalog:
        return {key: [] for key in self.default_categories}

    # ------------------------------------------------------------------
    # Persistence

    def _parse_snapshot(self, raw: Any) -> Catalog:
        if not isinstance(raw, dict):
            raise ValueError("snapshot root must be an object keyed by category")
        catalog: Catalog = {}
        seen: set = set()
        for category, entries in raw.items():
            if not isinstance(entries, list):
                raise ValueError(f"category {category!r} is not a list")
            items: List[Listing] = []
            for entry in entries:
                try:
                    listing = Listing.model_validate(entry)
                except SchemaError as exc:
                    logger.warning(
                        "Skipping invalid listing in category %s: %s", category, exc.errors()
                    )
                    continue
                if listing.id in seen:
                    logger.warning(
                        "Dropping duplicate listing id %s found in category %s", listing.id, category
                    )
                    continue
                seen.add(listing.id)
                items.append(listing)
            catalog[str(category)] = items
        return catalog

    def load(self) -> None:
        """Replace the in-memory catalogue with the snapshot, if one can be read.

        A missing, unreadable or malformed snapshot leaves the known
        categories initialised to empty lists. Individual records that do
        not validate are skipped with a warning and the rest are kept.
        This method never raises.
        """
        catalog = self._empty_catalog()
        if not self.snapshot_path.exists():
            logger.info("No menu snapshot at %s, starting empty", self.snapshot_path)
        else:
            try:
                with self.snapshot_path.open("r", encoding="utf-8") as f:
                    catalog = self._parse_snapshot(json.load(f))
                logger.info(
                    "Menu items loaded from %s (%d listings)",
                    self.snapshot_path,
                    sum(len(v) for v in catalog.values()),
                )
            except (OSError, ValueError) as exc:  # includes malformed JSON
                logger.error("Error loading menu items from %s: %s", self.snapshot_path, exc)
                catalog = self._empty_catalog()

        self._catalog = catalog
        self._last_id = max(
            (item.id for items in catalog.values() for item in items), default=0
        )

    def save(self) -> None:
        """Overwrite the snapshot with the full catalogue. Failures are logged only."""
        payload = {
            category: [item.model_dump(by_alias=True) for item in items]
            for category, items in self._catalog.items()
        }
        try:
            self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
            with self.snapshot_path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
        except OSError as exc:
            error = PersistenceError(f"Could not write {self.snapshot_path}: {exc}")
            logger.error("Error saving menu items: %s", error)

    # ------------------------------------------------------------------
    # Queries

    def get_all(self) -> Catalog:
        return self._catalog

    def get(self, listing_id: int) -> Listing:
        for items in self._catalog.values():
            for item in items:
                if item.id == listing_id:
                    return item
        raise NotFoundError("Menu item not found")

    # ------------------------------------------------------------------
    # Mutations

    def _next_id(self) -> int:
        candidate = int(time.time() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def insert(
        self,
        name: Optional[str],
        description: Optional[str],
        price: Any,
        category: Optional[str],
        image: Optional[str],
    ) -> Listing:
        """Validate and append a new listing to ``category``.

        Unknown categories are created on the fly. The snapshot is
        rewritten before returning.

        Raises
        ------
        ValidationError
            If a field is missing or ``price`` is not a non-negative number.
        """
        if any(_is_blank(v) for v in (name, description, price, category, image)):
            raise ValidationError("All fields are required")
        value = _parse_price(price)

        listing = Listing(
            id=self._next_id(),
            name=name,
            description=description,
            price=value,
            category=category,
            image=image,
            created_at=_now_iso(),
        )
        self._catalog.setdefault(category, []).append(listing)
        self.save()
        logger.info("Created menu item %s in %s", listing.id, category)
        return listing

    def delete(self, listing_id: int) -> Listing:
        """Remove a listing by id and clean up the image it owns.

        Categories are scanned in their insertion order and the first
        match is removed.

        Raises
        ------
        NotFoundError
            If no category holds a listing with this id.
        """
        removed: Optional[Listing] = None
        for items in self._catalog.values():
            for index, item in enumerate(items):
                if item.id == listing_id:
                    removed = items.pop(index)
                    break
            if removed is not None:
                break

        if removed is None:
            raise NotFoundError("Menu item not found")

        self._release_image(removed)
        self.save()
        logger.info("Deleted menu item %s from %s", removed.id, removed.category)
        return removed

    def _release_image(self, listing: Listing) -> None:
        if self.assets is None:
            return
        name = self.assets.name_from_reference(listing.image)
        if name is None:
            return
        try:
            self.assets.remove(name)
        except (CatalogError, OSError) as exc:
            logger.warning(
                "Could not remove image %s of menu item %s: %s", name, listing.id, exc
            )

    def count(self) -> int:
        return sum(len(items) for items in self._catalog.values())
