"""
Locator configuration.

Provides:
- Search bounds (document size guard, context scan limits)
- Variant heuristics (guessed conventional prefixes)
- Scroll behaviour for the highlight applier
- JSON persistence and environment lookup
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "termlocator.json"
CONFIG_ENV_VAR = "RDF_TERMLOCATOR_CONFIG"


class ConfigValidationError(Exception):
    """Configuration validation error."""
    pass


def _default_guessed_prefixes() -> Dict[str, List[str]]:
    return {
        "schema.org": ["schema", "sdo"],
        "purl.org/dc": ["dc", "dct"],
    }


@dataclass
class SearchConfig:
    """Bounds on how much text a single locate call may scan."""
    max_document_lines: int = 10000
    max_context_matches: int = 10
    block_window: int = 20
    relaxed_context_prefixes: List[str] = field(default_factory=lambda: ["oa", "ex", "ns"])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_document_lines": self.max_document_lines,
            "max_context_matches": self.max_context_matches,
            "block_window": self.block_window,
            "relaxed_context_prefixes": list(self.relaxed_context_prefixes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchConfig":
        return cls(
            max_document_lines=data.get("max_document_lines", 10000),
            max_context_matches=data.get("max_context_matches", 10),
            block_window=data.get("block_window", 20),
            relaxed_context_prefixes=data.get("relaxed_context_prefixes", ["oa", "ex", "ns"]),
        )


@dataclass
class VariantConfig:
    """Spelling heuristics."""
    guessed_prefixes: Dict[str, List[str]] = field(default_factory=_default_guessed_prefixes)
    use_well_known_prefixes: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "guessed_prefixes": {k: list(v) for k, v in self.guessed_prefixes.items()},
            "use_well_known_prefixes": self.use_well_known_prefixes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VariantConfig":
        return cls(
            guessed_prefixes=data.get("guessed_prefixes", _default_guessed_prefixes()),
            use_well_known_prefixes=data.get("use_well_known_prefixes", True),
        )


@dataclass
class ScrollConfig:
    """Where the highlighted line should land in the host container."""
    header_height: int = 70
    margin_below_header: int = 20
    retry_delays_ms: List[int] = field(default_factory=lambda: [50, 100, 200])

    @property
    def offset(self) -> int:
        return self.header_height + self.margin_below_header

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header_height": self.header_height,
            "margin_below_header": self.margin_below_header,
            "retry_delays_ms": list(self.retry_delays_ms),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScrollConfig":
        return cls(
            header_height=data.get("header_height", 70),
            margin_below_header=data.get("margin_below_header", 20),
            retry_delays_ms=data.get("retry_delays_ms", [50, 100, 200]),
        )


@dataclass
class LocatorConfig:
    """
    Complete configuration for the locator and highlight applier.

    Every section has defaults matching the behaviour of the editor
    integration, so ``LocatorConfig()`` is always usable.
    """
    search: SearchConfig = field(default_factory=SearchConfig)
    variants: VariantConfig = field(default_factory=VariantConfig)
    scroll: ScrollConfig = field(default_factory=ScrollConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "search": self.search.to_dict(),
            "variants": self.variants.to_dict(),
            "scroll": self.scroll.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LocatorConfig":
        return cls(
            search=SearchConfig.from_dict(data.get("search", {})),
            variants=VariantConfig.from_dict(data.get("variants", {})),
            scroll=ScrollConfig.from_dict(data.get("scroll", {})),
        )

    def validate(self) -> List[str]:
        """
        Validate the configuration.

        Returns:
            Empty list when the configuration is valid

        Raises:
            ConfigValidationError: Listing every problem found
        """
        errors = []
        if self.search.max_document_lines < 1:
            errors.append("search.max_document_lines must be positive")
        if self.search.max_context_matches < 1:
            errors.append("search.max_context_matches must be positive")
        if self.search.block_window < 1:
            errors.append("search.block_window must be positive")
        for root, labels in self.variants.guessed_prefixes.items():
            if not root:
                errors.append("variants.guessed_prefixes has an empty namespace key")
            if not all(labels):
                errors.append(f"variants.guessed_prefixes[{root!r}] has an empty prefix")
        if any(delay < 0 for delay in self.scroll.retry_delays_ms):
            errors.append("scroll.retry_delays_ms must not be negative")

        if errors:
            raise ConfigValidationError("; ".join(errors))
        return errors

    def save(self, path: Path) -> Path:
        """Save configuration to ``path`` (a directory or a file)."""
        path = Path(path)
        config_file = path / CONFIG_FILENAME if path.is_dir() else path
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        return config_file

    @classmethod
    def load(cls, path: Path) -> "LocatorConfig":
        """Load configuration from ``path``; defaults when it does not exist."""
        path = Path(path)
        config_file = path / CONFIG_FILENAME if path.is_dir() else path
        if config_file.exists():
            with open(config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            config = cls.from_dict(data)
            config.validate()
            logger.info(f"Loaded locator configuration from {config_file}")
            return config
        return cls()

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "LocatorConfig":
        """Load from the file named by ``RDF_TERMLOCATOR_CONFIG``, if set."""
        environ = os.environ if environ is None else environ
        location = environ.get(CONFIG_ENV_VAR)
        if not location:
            return cls()
        return cls.load(Path(location))
