"""Dataset Store (v1): colaborador versionado de datasets.

O resolver consulta o store para responder:
- o identificador X existe?
- qual a versão mais recente de X?
- a versão V de X existe?

O executor usa o store para ler o conteúdo de inputs externos e registrar
novas versões dos outputs `type: dataset`.

Decisões (v1):
- Versões são append-only: escrever em um identificador existente **nunca**
  altera conteúdo anterior, sempre cria uma nova versão.
- Conteúdo idêntico gera versões distintas (sem deduplicação/aliasing).
- Identificadores de versão são sequenciais por dataset: `v1`, `v2`, ...
- "Mais recente" = última versão registrada.

Limites explícitos:
- Não persiste em disco
- Não é thread-safe: o store pertence ao chamador
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from flowresolve.core.config.hashing import canonical_sha256


@dataclass(frozen=True)
class DatasetVersion:
    """Registro imutável de uma versão de dataset."""

    id: str
    version: str
    content_sha256: str
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "version": self.version,
            "content_sha256": self.content_sha256,
            "created_at": self.created_at,
        }


@runtime_checkable
class DatasetStore(Protocol):
    """Contrato mínimo do Dataset Store (duck typing)."""

    def exists(self, dataset_id: str) -> bool:
        ...

    def latest_version(self, dataset_id: str) -> Optional[str]:
        ...

    def has_version(self, dataset_id: str, version: str) -> bool:
        ...

    def record_version(self, dataset_id: str, content: Any) -> DatasetVersion:
        ...

    def read(self, dataset_id: str, version: str) -> Any:
        ...


class InMemoryDatasetStore:
    """Store canônica (v1) em memória, append-only por identificador."""

    def __init__(self) -> None:
        self._versions: Dict[str, List[DatasetVersion]] = {}
        self._content: Dict[tuple, Any] = {}

    @classmethod
    def from_mapping(cls, seed: Mapping[str, Sequence[Any]]) -> "InMemoryDatasetStore":
        """Cria um store com `{id: [conteúdo_v1, conteúdo_v2, ...]}`."""
        store = cls()
        for dataset_id, contents in seed.items():
            for content in contents:
                store.record_version(dataset_id, content)
        return store

    # ------------------------------------------------------------------
    # Consultas (Reference Resolver)
    # ------------------------------------------------------------------
    def exists(self, dataset_id: str) -> bool:
        return bool(self._versions.get(dataset_id))

    def latest_version(self, dataset_id: str) -> Optional[str]:
        versions = self._versions.get(dataset_id)
        if not versions:
            return None
        return versions[-1].version

    def has_version(self, dataset_id: str, version: str) -> bool:
        return (dataset_id, version) in self._content

    def versions(self, dataset_id: str) -> List[DatasetVersion]:
        return list(self._versions.get(dataset_id, []))

    # ------------------------------------------------------------------
    # Leitura / escrita (Executor)
    # ------------------------------------------------------------------
    def read(self, dataset_id: str, version: str) -> Any:
        key = (dataset_id, version)
        if key not in self._content:
            raise KeyError(f"{dataset_id}@{version}")
        return deepcopy(self._content[key])

    def record_version(self, dataset_id: str, content: Any) -> DatasetVersion:
        """Registra uma NOVA versão sob `dataset_id`.

        Returns:
            DatasetVersion: registro da versão criada.
        """
        if not isinstance(dataset_id, str) or not dataset_id.strip():
            raise ValueError("dataset_id must be a non-empty string")

        versions = self._versions.setdefault(dataset_id, [])
        record = DatasetVersion(
            id=dataset_id,
            version=f"v{len(versions) + 1}",
            content_sha256=canonical_sha256(content),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        versions.append(record)
        self._content[(dataset_id, record.version)] = deepcopy(content)

        return record


__all__ = ["DatasetStore", "DatasetVersion", "InMemoryDatasetStore"]
