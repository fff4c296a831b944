from .base import BaseDocumentStore, BaseTenantDirectory, TenantRecord

__all__ = ["BaseDocumentStore", "BaseTenantDirectory", "TenantRecord"]
