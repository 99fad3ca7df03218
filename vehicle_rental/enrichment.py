import logging
from typing import Any, Dict, Optional

import httpx

from vehicle_rental import config
from vehicle_rental.circuit_breaker import CircuitBreaker, circuit_breaker_manager

logger = logging.getLogger(__name__)

SPEC_FIELDS = {
    "class": "vehicle_class",
    "drive": "drive",
    "fuel_type": "fuel_type",
    "transmission": "transmission",
    "combination_mpg": "combination_mpg",
    "displacement": "displacement",
}
NUMERIC_FIELDS = {"combination_mpg", "displacement"}


class VehicleDataClient:
    """Looks up technical specs for a make/model/year on the vehicle data API."""

    def __init__(
        self,
        base_url: str = config.VEHICLE_API_URL,
        api_key: str = config.VEHICLE_API_KEY,
        timeout: float = config.VEHICLE_API_TIMEOUT,
        breaker: Optional[CircuitBreaker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.breaker = breaker or circuit_breaker_manager.get_breaker("vehicle_data_api")
        self.transport = transport

    async def fetch_specs(self, make: str, model: str, year: int) -> Dict[str, Any]:
        """
        Return the model columns that could be filled for the vehicle.

        Failures of any kind are logged and yield an empty dict so that a
        vehicle can always be listed without the extra data.
        """
        async def fetch():
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    self.base_url,
                    params={"make": make, "model": model, "year": year},
                    headers={"X-Api-Key": self.api_key},
                )
                response.raise_for_status()
                return response.json()

        def fallback():
            return None

        data = await self.breaker.call(fetch, fallback=fallback)
        if data is None:
            logger.warning(f"Vehicle data unavailable for {make} {model} {year}")
            return {}
        return _map_specs(data)


def _map_specs(data: Any) -> Dict[str, Any]:
    if isinstance(data, list):
        if not data:
            return {}
        data = data[0]
    if not isinstance(data, dict):
        return {}
    specs = {}
    for field, column in SPEC_FIELDS.items():
        value = data.get(field)
        if value is None:
            continue
        if field in NUMERIC_FIELDS:
            # the API returns placeholder text for fields outside the free tier
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            value = float(value)
        else:
            value = str(value)
        specs[column] = value
    return specs


vehicle_data_client = VehicleDataClient()


def get_vehicle_data_client() -> VehicleDataClient:
    return vehicle_data_client
