class StoreError(Exception):
    """The document store could not complete a read or write."""


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} does not exist")
        self.collection = collection
        self.doc_id = doc_id


class ContentStoreError(Exception):
    """An attachment could not be written to the content store."""


class IdentityError(Exception):
    ALREADY_EXISTS = "already-exists"
    WEAK_CREDENTIAL = "weak-credential"
    OTHER = "other"

    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code)
        self.code = code
