"""flowresolve: Document (core).

Colaborador "Text Parser": converte texto de workflow em mapping.
 - parsing (YAML/JSON)
 - hashing canônico do documento (rastreabilidade)
"""

from .errors import (  # noqa: F401
    DocumentError,
    DocumentNotFoundError,
    DocumentParseError,
    UnsupportedDocumentFormatError,
)
from .hashing import compute_document_hash  # noqa: F401
from .loader import load_workflow_document, parse_workflow_text  # noqa: F401
