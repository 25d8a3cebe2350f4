"""
Multi-Tenancy Module
====================

Per-website directory trees, their registration into a host application and
the customer registry.
"""

from .models import Website, Customer
from .directory import (
    Directory, DirectoryKind, CreationReport, CreationStatus,
    resolve_tenant_root
)
from .host import HostApplication, Application, FlaskApplication
from .translation import FileLoader, Translator
from .customer_repository import (
    BaseRepositoryContract, CustomerRepositoryContract, MemoryCustomerRepository
)

__all__ = [
    "Website",
    "Customer",
    "Directory",
    "DirectoryKind",
    "CreationReport",
    "CreationStatus",
    "resolve_tenant_root",
    "HostApplication",
    "Application",
    "FlaskApplication",
    "FileLoader",
    "Translator",
    "BaseRepositoryContract",
    "CustomerRepositoryContract",
    "MemoryCustomerRepository"
]
