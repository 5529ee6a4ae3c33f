from abc import ABC, abstractmethod
from typing import Any

from .types import DispatchRequest


class ProviderBackend(ABC):
    """
    Abstract provider boundary.
    Pipeline code must depend ONLY on this interface.
    """

    @abstractmethod
    def dispatch(self, request: DispatchRequest) -> Any:
        """
        Send a prompt to the provider and return its raw response envelope.

        Raises:
            UpstreamError: transport failure, timeout or non-2xx status.
        """
        raise NotImplementedError
