from portal.models.document import StoredDocument
from portal.models.identity import Identity

__all__ = ["StoredDocument", "Identity"]
