"""
Customer Repository
===================

Data-access contract for customers and an in-memory implementation.
"""

import logging
import os
import shutil
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..error_handling import RepositoryError
from .directory import Directory
from .models import Customer, Website

logger = logging.getLogger(__name__)


class BaseRepositoryContract(ABC):
    """Interface shared by repositories."""

    @abstractmethod
    def find_by_id(self, entity_id: int):
        """Find an entity by primary key."""
        pass

    @abstractmethod
    def create(self, entity):
        """Persist a new entity."""
        pass


class CustomerRepositoryContract(BaseRepositoryContract):
    """Interface for customer persistence."""

    @abstractmethod
    def all(self) -> List[Customer]:
        """Load all customers."""
        pass

    @abstractmethod
    def force_delete_by_name(self, name: str) -> Optional[bool]:
        """Remove a customer and everything related; None when not found."""
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Customer]:
        """Find a customer by name."""
        pass


class MemoryCustomerRepository(CustomerRepositoryContract):
    """
    In-memory customer store for development and tests.

    Websites are kept alongside customers so force deletion can cascade. When
    ``tenant_root`` is set the directory tree of every removed website is
    deleted as well.
    """

    def __init__(self, tenant_root: Optional[str] = None):
        self.customers: Dict[int, Customer] = {}
        self.websites: Dict[int, Website] = {}
        self.tenant_root = tenant_root

    def find_by_id(self, entity_id: int) -> Optional[Customer]:
        return self.customers.get(entity_id)

    def create(self, entity: Customer) -> Customer:
        if entity.id in self.customers:
            raise RepositoryError(f"Customer {entity.id} already exists", customer_id=entity.id)
        if self.find_by_name(entity.name):
            raise RepositoryError(f"Customer name {entity.name} already taken", name=entity.name)

        self.customers[entity.id] = entity
        return entity

    def all(self) -> List[Customer]:
        return list(self.customers.values())

    def find_by_name(self, name: str) -> Optional[Customer]:
        for customer in self.customers.values():
            if customer.name == name:
                return customer
        return None

    def add_website(self, website: Website) -> Website:
        """Attach a website to the store."""
        if website.customer_id is not None and website.customer_id not in self.customers:
            raise RepositoryError(f"Unknown customer {website.customer_id}", website_id=website.id)
        for other in self.websites.values():
            if other.id != website.id and other.identifier == website.identifier:
                raise RepositoryError(f"Identifier {website.identifier} already in use", website_id=website.id)

        self.websites[website.id] = website
        return website

    def websites_for(self, customer: Customer) -> List[Website]:
        return [w for w in self.websites.values() if w.customer_id == customer.id]

    def force_delete_by_name(self, name: str) -> Optional[bool]:
        customer = self.find_by_name(name)
        if customer is None:
            return None

        for website in self.websites_for(customer):
            self._remove_website(website)

        del self.customers[customer.id]
        logger.info(f"Force deleted customer {customer.name} ({customer.id})")
        return True

    def _remove_website(self, website: Website):
        if self.tenant_root:
            base = Directory(website, root=self.tenant_root).base()
            if base and os.path.isdir(base):
                shutil.rmtree(base)
                logger.info(f"Removed tenant directory {base}")

        del self.websites[website.id]
