"""
multitenant
===========

Multi-tenancy support: isolated per-website directory trees, tenant config
merged over application defaults and a customer registry.
"""

from .tenancy import (
    Website, Customer, Directory, DirectoryKind,
    Application, FlaskApplication, MemoryCustomerRepository
)

__version__ = "1.0.0"

__all__ = [
    "Website",
    "Customer",
    "Directory",
    "DirectoryKind",
    "Application",
    "FlaskApplication",
    "MemoryCustomerRepository"
]
