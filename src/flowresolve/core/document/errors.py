"""Erros canônicos do carregamento de documentos de workflow.

O parser de texto é um colaborador externo ao resolver: suas falhas são
reportadas antes que a validação de schema comece.
"""


class DocumentError(Exception):
    """Erro base do carregamento de documentos de workflow."""


class DocumentNotFoundError(DocumentError):
    """Arquivo do workflow não existe no caminho informado."""


class UnsupportedDocumentFormatError(DocumentError):
    """Formato de documento não suportado (v1: YAML/JSON)."""


class DocumentParseError(DocumentError):
    """Falha ao parsear YAML/JSON ou raiz não é um mapping."""
