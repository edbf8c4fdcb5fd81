"""External client interfaces."""

from abc import ABC, abstractmethod

from src.domain.entities import ClientInfo, EstablishmentInfo


class ClientDirectory(ABC):
    """
    Abstract client for the client directory.

    Client records (registration, contact data, activation) are owned by
    another service; the ledger only reads them.
    """

    @abstractmethod
    async def get_client_by_id(self, client_id: int) -> ClientInfo:
        """
        Fetch a client.

        Args:
            client_id: The client's identifier

        Returns:
            The client record

        Raises:
            ClientNotFoundException: If the client doesn't exist
            DirectoryAPIException: If the API returns an error
            DirectoryAPITimeoutException: If the request times out
        """
        ...


class EstablishmentDirectory(ABC):
    """Abstract client for the establishment directory."""

    @abstractmethod
    async def get_establishment_by_id(self, establishment_id: int) -> EstablishmentInfo:
        """
        Fetch an establishment with its admin and default late-fee rule.

        Args:
            establishment_id: The establishment's identifier

        Returns:
            The establishment record

        Raises:
            EstablishmentNotFoundException: If the establishment doesn't exist
            DirectoryAPIException: If the API returns an error
            DirectoryAPITimeoutException: If the request times out
        """
        ...
