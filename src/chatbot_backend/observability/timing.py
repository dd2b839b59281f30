"""Helpers de instrumentação de latência."""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import Generator


def elapsed_ms_since(start: float) -> float:
    """Milissegundos decorridos desde `start` (perf_counter), arredondado."""
    return round((time.perf_counter() - start) * 1000, 2)


@contextlib.contextmanager
def timed(component: str, logger: logging.Logger | None = None) -> Generator[None, None, None]:
    """Mede e loga o tempo gasto por um componente.

    Uso:
        with timed("dialogue_engine"):
            ...  # avalia o turno

    Emite `component_latency` com `component` e `elapsed_ms`.
    """
    log = logger or logging.getLogger(__name__)
    start = time.perf_counter()
    try:
        yield
    finally:
        log.info(
            "component_latency",
            extra={
                "component": component,
                "elapsed_ms": elapsed_ms_since(start),
            },
        )
