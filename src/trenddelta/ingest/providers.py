"""Trend series providers.

A provider returns the averaged samples of one parameter of one element,
ascending by time and restricted to a requested :class:`AbsoluteRange`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from ..config import Settings
from ..types import AbsoluteRange, ElementRef, Sample
from .trend import TrendParseError, read_trend

logger = logging.getLogger(__name__)

SeriesKey = Tuple[int, int, int]


class ProviderFailure(RuntimeError):
    """Raised when a provider returns no usable trend payload."""

    def __init__(self, message: str = "Invalid trend data.", *, detail: str | None = None):
        self.detail = detail
        super().__init__(f"{message} {detail}" if detail else message)


@runtime_checkable
class TrendProvider(Protocol):
    """Protocol describing a trend series source."""

    def fetch(
        self,
        element: ElementRef,
        parameter_id: int,
        time_range: AbsoluteRange,
    ) -> Optional[Iterable[Sample]]:
        """Return samples of ``parameter_id`` on ``element`` within ``time_range``."""


def _within(samples: Iterable[Sample], time_range: AbsoluteRange) -> List[Sample]:
    return [sample for sample in samples if time_range.contains(sample.timestamp)]


@dataclass
class InMemoryTrendProvider:
    """Provider backed by in-process sample sequences.

    ``series`` maps ``(dma_id, element_id, parameter_id)`` to samples that are
    already ordered by time.
    """

    series: Dict[SeriesKey, Sequence[Sample]] = field(default_factory=dict)

    def add(self, element: ElementRef, parameter_id: int, samples: Iterable[Sample]) -> None:
        self.series[(element.dma_id, element.element_id, parameter_id)] = list(samples)

    def fetch(
        self,
        element: ElementRef,
        parameter_id: int,
        time_range: AbsoluteRange,
    ) -> List[Sample]:
        key = (element.dma_id, element.element_id, parameter_id)
        if key not in self.series:
            raise ProviderFailure(detail=f"no trend for parameter {parameter_id} on element {element}")
        return _within(self.series[key], time_range)


class FileTrendProvider:
    """Provider reading one trend file per element parameter.

    The file name is built from ``filename`` formatted with ``dma_id``,
    ``element_id`` and ``parameter_id`` and resolved below ``root``.
    """

    def __init__(
        self,
        root: str | Path = ".",
        filename: str = "{dma_id}-{element_id}-{parameter_id}.csv",
        *,
        value_column: Optional[str] = None,
    ) -> None:
        self.root = Path(root)
        self.filename = filename
        self.value_column = value_column

    @classmethod
    def from_settings(cls, settings: Settings) -> "FileTrendProvider":
        cfg = settings.provider
        return cls(cfg.root, cfg.filename, value_column=cfg.value_column)

    def path_for(self, element: ElementRef, parameter_id: int) -> Path:
        name = self.filename.format(
            dma_id=element.dma_id,
            element_id=element.element_id,
            parameter_id=parameter_id,
        )
        return self.root / name

    def fetch(
        self,
        element: ElementRef,
        parameter_id: int,
        time_range: AbsoluteRange,
    ) -> List[Sample]:
        path = self.path_for(element, parameter_id)
        if not path.is_file():
            raise ProviderFailure(detail=f"trend file not found: {path}")
        logger.debug("Reading trend file %s", path)
        try:
            samples = _within(read_trend(path, value_column=self.value_column), time_range)
        except (TrendParseError, OSError) as exc:
            raise ProviderFailure(detail=str(exc)) from exc
        logger.debug("Read %d samples in range from %s", len(samples), path)
        return samples


def provider_from_mapping(series: Mapping[SeriesKey, Iterable[Sample]]) -> InMemoryTrendProvider:
    """Build an :class:`InMemoryTrendProvider` from a plain mapping."""

    return InMemoryTrendProvider({key: list(samples) for key, samples in series.items()})


__all__ = [
    "FileTrendProvider",
    "InMemoryTrendProvider",
    "ProviderFailure",
    "SeriesKey",
    "TrendProvider",
    "provider_from_mapping",
]
