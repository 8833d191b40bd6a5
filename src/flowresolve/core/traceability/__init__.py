# src/flowresolve/core/traceability/__init__.py
"""
Rastreabilidade da execução de planos: Manifest v1.

API pública:
    - PlanManifest     → estrutura canônica do Manifest
    - create_manifest  → criação explícita (sem eventos)
    - add_event        → registro explícito no Event Log
    - job_started / job_finished / job_failed → ciclo de vida de jobs
    - save_manifest / load_manifest → round-trip JSON
"""

from .manifest import (
    PlanManifest,
    add_event,
    create_manifest,
    job_failed,
    job_finished,
    job_started,
    load_manifest,
    save_manifest,
)

__all__ = [
    "PlanManifest",
    "add_event",
    "create_manifest",
    "job_failed",
    "job_finished",
    "job_started",
    "load_manifest",
    "save_manifest",
]
