from typing import Any, Dict

from .base import BackendResource
from .envelope import ApiResponse


class CabApi(BackendResource):
    """Driver cab endpoints."""

    def add_cab(self, cab: Dict[str, Any]) -> ApiResponse:
        return self._call('POST', '/driver/addcab',
                          'Cab added successfully', 'Failed to add cab', json=cab)

    def get_cabs(self) -> ApiResponse:
        return self._call('GET', '/driver/getcabs',
                          'Cabs fetched successfully', 'Failed to fetch cabs')
