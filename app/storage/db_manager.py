from abc import ABC, abstractmethod
from typing import Any, Dict, List


class CatalogManager(ABC):
    """
    Abstract base class for catalog and metadata storage.
    """

    @abstractmethod
    def load_catalog(self) -> List[Dict[str, Any]]:
        """Load the ordered list of app records. Raises if unreadable or malformed."""
        pass

    @abstractmethod
    def save_catalog(self, apps: List[Dict[str, Any]]) -> None:
        """Rewrite the catalog in place."""
        pass

    @abstractmethod
    def load_metadata(self) -> Dict[str, Any]:
        """Load the metadata mapping (empty when nothing was generated yet)."""
        pass

    @abstractmethod
    def save_metadata(self, meta: Dict[str, Any]) -> None:
        """Replace the metadata file."""
        pass
