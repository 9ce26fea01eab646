class KnowledgeVaultError(Exception):
    """Base class for errors surfaced to the user-facing flows."""


class ProcessingError(KnowledgeVaultError):
    """Rendering or extraction failed; the document was not stored."""


class OfflineError(KnowledgeVaultError):
    """AI processing was requested while the service is offline."""


class SearchError(KnowledgeVaultError):
    """The ranking collaborator call failed."""
