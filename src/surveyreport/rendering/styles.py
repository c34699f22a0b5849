"""Style variant registry — maps declared variant names to class names."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from surveyreport.models.enums import StyleBucket

_DEFAULT_VARIANTS = Path(__file__).parent / "variants.yaml"
DEFAULT_VARIANT = "default"
DEFAULT_MAX_DEPTH = 32


class StyleVariantRegistry:
    """Load and look up style variant buckets from YAML."""

    def __init__(self, buckets: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._buckets: dict[str, dict[str, str]] = {}
        if buckets is None:
            self.load_variants()
        else:
            for name, variants in buckets.items():
                self._buckets[name] = {k: str(v) for k, v in variants.items()}

    def load_variants(self, path: Path | None = None) -> None:
        """Load variant buckets from a YAML file (defaults to the packaged one)."""
        path = path or _DEFAULT_VARIANTS
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        for name, variants in data.items():
            if not isinstance(variants, dict):
                continue
            self._buckets[str(name)] = {
                str(k): "" if v is None else str(v) for k, v in variants.items()
            }

    def resolve(self, bucket: str, variant: str | None = None) -> str:
        """Class names for ``variant`` in ``bucket``.

        Unknown variants fall back to the bucket's default; unknown buckets
        resolve to an empty string.
        """
        variants = self._buckets.get(bucket)
        if variants is None:
            return ""
        key = variant or DEFAULT_VARIANT
        if key in variants:
            return variants[key]
        return variants.get(DEFAULT_VARIANT, "")

    def buckets(self) -> list[str]:
        return list(self._buckets)

    def variants(self, bucket: str) -> list[str]:
        return list(self._buckets.get(bucket, {}))

    def enrich_node(self, node: Mapping[str, Any]) -> dict[str, Any]:
        """Return a copy of ``node`` with card class names filled in.

        Only the node itself is enriched; ``components`` are left as they are.
        """
        enriched = dict(node)
        if node.get("type") == "card":
            enriched["className"] = self.resolve(StyleBucket.CARD, node.get("cardStyleVariant"))
            if node.get("cardContentVariant"):
                enriched["textClassName"] = self.resolve(
                    StyleBucket.CARD_CONTENT, node["cardContentVariant"]
                )
            if node.get("titleStyleVariant"):
                enriched["titleClassName"] = self.resolve(
                    StyleBucket.CARD_TITLE, node["titleStyleVariant"]
                )
        return enriched

    def enrich_component(
        self, node: Mapping[str, Any], max_depth: int = DEFAULT_MAX_DEPTH, depth: int = 1
    ) -> dict[str, Any]:
        """Return a copy of ``node`` with card class names filled in, recursively.

        Children below ``max_depth`` levels are left unenriched.
        """
        enriched = self.enrich_node(node)
        children = node.get("components")
        if isinstance(children, list) and depth < max_depth:
            enriched["components"] = [
                self.enrich_component(child, max_depth, depth + 1)
                if isinstance(child, Mapping) else child
                for child in children
            ]
        return enriched

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, bucket: str) -> bool:
        return bucket in self._buckets
