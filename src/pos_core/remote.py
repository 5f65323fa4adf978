from __future__ import annotations

from dataclasses import dataclass

from .collaborators import matches_term
from .exceptions import ApiError, NotFoundError, SaleSinkError
from .http_client import HttpClient
from .models import Product, Sale


def _rows(data: object) -> list[dict]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("rows"), list):
        return data["rows"]
    raise ValueError("Expected product list response to be a JSON array or an object with rows")


@dataclass
class HttpCatalogProvider:
    """Read-only product catalog served by the back office."""

    http: HttpClient
    path: str = "/products"

    def list_products(self) -> list[Product]:
        data = self.http.request("GET", self.path, use_cache=True)
        return [Product.model_validate(row) for row in _rows(data)]

    def search(self, term: str) -> list[Product]:
        needle = term.strip()
        if not needle:
            return self.list_products()
        data = self.http.request("GET", self.path, params={"q": needle}, use_cache=True)
        # The server may match more loosely than the product grid does.
        return [product for product in (Product.model_validate(row) for row in _rows(data)) if matches_term(product, needle)]

    def get(self, product_id: str) -> Product | None:
        try:
            data = self.http.request("GET", f"{self.path}/{product_id}", use_cache=True)
        except NotFoundError:
            return None
        if not isinstance(data, dict):
            raise ValueError("Expected product response to be a JSON object")
        return Product.model_validate(data)


@dataclass
class HttpSaleSink:
    """Posts finalized sales; the provisional sale id doubles as idempotency key."""

    http: HttpClient
    path: str = "/sales"

    def record(self, sale: Sale) -> Sale:
        try:
            data = self.http.request(
                "POST",
                self.path,
                json_body=sale.model_dump(mode="json"),
                headers={"Idempotency-Key": sale.id},
                retry_mutation=True,
            )
        except ApiError as exc:
            raise SaleSinkError(
                exc.message,
                details={"code": exc.code, "status_code": exc.status_code, "details": exc.details},
                trace_id=exc.trace_id,
            ) from exc
        if data is None:
            return sale
        if not isinstance(data, dict):
            raise SaleSinkError("Expected sale response to be a JSON object", trace_id=self.http.trace.trace_id)
        durable_id = data.get("id")
        if durable_id is None:
            return sale
        return sale.model_copy(update={"id": str(durable_id)})
