"""
Address validator: the entry point for validating addresses.
"""

from typing import Optional

from .event_logger import EventLogger
from .models import AddressData, FieldProblemMap, ValidationResult
from .supplier import Supplier
from .validation_task import ValidationTask


COMPONENT = "address_validator"


class AddressValidator:
    """
    Validates addresses against metadata obtained from a supplier.

    With an OndemandSupplier rules are fetched as needed; with a
    PreloadSupplier the country must have been loaded beforehand.
    """

    async def __aenter__(self) -> "AddressValidator":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def __init__(self, supplier: Supplier, logger: Optional[EventLogger] = None) -> None:
        self._supplier = supplier
        self._logger = logger

    async def close(self) -> None:
        """Release the network client of the underlying supplier."""
        await self._supplier.close()

    @property
    def supplier(self) -> Supplier:
        return self._supplier

    async def validate(
        self,
        address: AddressData,
        allow_postal: bool = False,
        require_name: bool = False,
        filter: Optional[FieldProblemMap] = None,
        problems: Optional[FieldProblemMap] = None,
    ) -> ValidationResult:
        """
        Validate an address.

        Args:
            address: Address to validate
            allow_postal: Accept P.O. boxes in the street address
            require_name: Report a missing recipient
            filter: Problems to report; None or empty reports all
            problems: Optional map to collect problems into; it is cleared first

        Returns:
            ValidationResult; success is False when the rule data could not
            be obtained, and an empty problem map means the address is valid
        """
        task = ValidationTask(
            address,
            allow_postal=allow_postal,
            require_name=require_name,
            filter=filter,
            problems=problems,
        )
        success, found = await task.run(self._supplier)

        if self._logger:
            self._logger.debug(
                COMPONENT,
                "Validated address",
                {
                    "region_code": address.region_code,
                    "success": success,
                    "problems": [f"{f.value}:{p.value}" for f, p in found],
                },
            )

        return ValidationResult(success=success, address=address, problems=found)
