from __future__ import annotations

from typing import Any, Mapping, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit


class UrlManager:
    """
    Построение URL по маршруту "controller/action" и параметрам.

    Параметры попадают в query string в порядке передачи;
    значения None отбрасываются, '#' задает якорь.
    """

    def __init__(self, base_url: str = "", host_info: str = "http://localhost"):
        self.base_url = base_url.rstrip("/")
        self.host_info = host_info.rstrip("/")

    def create_url(self, route: str, params: Optional[Mapping[str, Any]] = None) -> str:
        params = dict(params or {})
        anchor = params.pop("#", None)

        url = f"{self.base_url}/{str(route).strip('/')}"
        query = urlencode(
            [(k, _query_value(v)) for k, v in params.items() if v is not None],
            doseq=True,
        )
        if query:
            url += "?" + query
        if anchor:
            url += "#" + str(anchor)
        return url

    def create_absolute_url(
        self,
        route: str,
        params: Optional[Mapping[str, Any]] = None,
        scheme: Optional[str] = None,
    ) -> str:
        url = self.host_info + self.create_url(route, params)
        if scheme:
            parts = urlsplit(url)
            url = urlunsplit((scheme, *parts[1:]))
        return url


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    return value


__all__ = ["UrlManager"]
