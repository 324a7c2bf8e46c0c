"""
Pattern Library - discovers and loads juggling patterns.

The library provides access to both the built-in YAML patterns and
user-owned patterns in a project directory. Project files override library
files with the same category and name.

Layout:
    <root>/<category>/<name>.yaml      category is solo, passing or hss
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from chuk_mcp_juggling.constants import PatternCategory
from chuk_mcp_juggling.models.pattern import (
    PatternConfig,
    PatternDocument,
    PatternMetadata,
    PatternVariant,
)

logger = logging.getLogger(__name__)


class PatternLibrary:
    """
    Discovers and loads patterns from library and project.

    The library maintains a cache of loaded documents and provides
    filtering by category.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
    ):
        """
        Initialize the library.

        Args:
            library_path: Path to built-in pattern library
            project_path: Path to project patterns (user-owned)
        """
        self.library_path = library_path
        self.project_path = project_path
        self._cache: dict[str, PatternDocument] = {}
        self._metadata_cache: dict[str, PatternMetadata] = {}

    def list_patterns(self, category: PatternCategory | None = None) -> list[PatternMetadata]:
        """
        List available patterns, optionally filtered by category.

        Returns:
            Pattern metadata sorted by category then name
        """
        self._ensure_metadata_loaded()
        result = list(self._metadata_cache.values())
        if category:
            result = [m for m in result if m.category == category]
        return sorted(result, key=lambda m: (m.category.value, m.name))

    def get_pattern(self, pattern_id: str) -> PatternDocument | None:
        """
        Get a pattern by ID ('category/name', e.g. 'solo/cascade').

        Returns:
            PatternDocument or None if not found
        """
        if pattern_id in self._cache:
            return self._cache[pattern_id]

        doc = self._load_pattern(pattern_id)
        if doc:
            self._cache[pattern_id] = doc
        return doc

    def get_metadata(self, pattern_id: str) -> PatternMetadata | None:
        self._ensure_metadata_loaded()
        return self._metadata_cache.get(pattern_id)

    def copy_to_project(self, pattern_id: str) -> Path | None:
        """
        Copy a library pattern into the project so it can be edited.

        Returns:
            Path to the copied file, or None if the pattern was not found

        Raises:
            ValueError: If no project path is configured
        """
        if not self.project_path:
            raise ValueError("No project path configured")

        doc = self.get_pattern(pattern_id)
        if not doc:
            return None

        category_dir = self.project_path / doc.category.value
        category_dir.mkdir(parents=True, exist_ok=True)
        target_path = category_dir / f"{doc.name}.yaml"

        with open(target_path, "w") as f:
            yaml.safe_dump(document_to_yaml_dict(doc), f, default_flow_style=False, sort_keys=False)

        # Clear caches so the project copy takes precedence
        self._cache.pop(pattern_id, None)
        self._metadata_cache.clear()
        logger.debug("Copied %s to %s", pattern_id, target_path)
        return target_path

    def register_pattern(self, doc: PatternDocument, pattern_id: str | None = None) -> str:
        """
        Register a pattern programmatically.

        Args:
            doc: Pattern document to register
            pattern_id: Optional ID (defaults to category/name)

        Returns:
            The pattern ID
        """
        if pattern_id is None:
            pattern_id = f"{doc.category.value}/{doc.name}"
        self._ensure_metadata_loaded()
        self._cache[pattern_id] = doc
        self._metadata_cache[pattern_id] = PatternMetadata.from_document(doc)
        return pattern_id

    def _ensure_metadata_loaded(self) -> None:
        """Load metadata for all available patterns."""
        if self._metadata_cache:
            return

        if self.library_path and self.library_path.exists():
            self._scan_directory(self.library_path)

        # Project entries overwrite library entries
        if self.project_path and self.project_path.exists():
            self._scan_directory(self.project_path)

    def _scan_directory(self, base_path: Path) -> None:
        for category_dir in sorted(base_path.iterdir()):
            if not category_dir.is_dir():
                continue
            try:
                category = PatternCategory(category_dir.name)
            except ValueError:
                continue

            for pattern_file in sorted(category_dir.glob("*.yaml")):
                pattern_id = f"{category.value}/{pattern_file.stem}"
                doc = self._load_pattern_file(pattern_file, category)
                if doc is not None:
                    self._metadata_cache[pattern_id] = PatternMetadata.from_document(
                        doc, path=str(pattern_file)
                    )

    def _load_pattern(self, pattern_id: str) -> PatternDocument | None:
        parts = pattern_id.split("/")
        if len(parts) != 2:
            return None
        category_str, name = parts
        try:
            category = PatternCategory(category_str)
        except ValueError:
            return None

        for root in (self.project_path, self.library_path):
            if root:
                path = root / category.value / f"{name}.yaml"
                if path.exists():
                    return self._load_pattern_file(path, category)
        return None

    def _load_pattern_file(self, path: Path, category: PatternCategory) -> PatternDocument | None:
        """Load one YAML file; unreadable or invalid files are logged and skipped."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
            return document_from_yaml_dict(data, category, default_name=path.stem)
        except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Skipping pattern file %s: %s", path, e)
            return None


def document_from_yaml_dict(
    data: dict[str, Any], category: PatternCategory, default_name: str = "unknown"
) -> PatternDocument:
    """Create a PatternDocument from a YAML dict."""
    variants = {}
    for name, vdata in (data.get("variants") or {}).items():
        if isinstance(vdata, dict):
            variants[name] = PatternVariant(
                name=name,
                description=vdata.get("description", ""),
                config={k: v for k, v in vdata.items() if k != "description"},
            )

    config = data.get("config") or {}
    return PatternDocument(
        schema=data.get("schema", "pattern/v1"),
        name=data.get("name", default_name),
        category=PatternCategory(data.get("category", category.value)),
        description=data.get("description", ""),
        version=str(data.get("version", "1.0.0")),
        config=PatternConfig.model_validate(config),
        variants=variants,
    )


def document_to_yaml_dict(doc: PatternDocument) -> dict[str, Any]:
    """Convert a PatternDocument to a YAML dict."""
    result: dict[str, Any] = {
        "schema": doc.schema_version,
        "name": doc.name,
        "category": doc.category.value,
        "description": doc.description,
        "version": doc.version,
        "config": {
            "pattern": doc.config.pattern,
            **doc.config.model_dump(exclude_none=True, exclude_defaults=True),
        },
    }
    if doc.variants:
        result["variants"] = {}
        for name, variant in doc.variants.items():
            vdict = dict(variant.config)
            if variant.description:
                vdict["description"] = variant.description
            result["variants"][name] = vdict
    return result
