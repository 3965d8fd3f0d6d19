"""
Record gateway - all network I/O to the remote record store

Five operations per collection (list, get, create, update, delete), the
identity lookup that gates the console, and relation-option prefetching.
Nothing is cached; every call goes to the store.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import httpx

from config.settings import HTTP_TIMEOUT, LIST_PAGE_SIZE, RELATION_OPTIONS_LIMIT
from models.form import FormSubmission
from models.record import AdminIdentity, ListResult, Record, RelationOption
from schema.base import CollectionSchema, RelationField, MultiRelationField
from utils.helpers import resolve_path

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "/api/admin"

WriteBody = Union[FormSubmission, Dict[str, Any]]

@dataclass
class Session:
    """Store location plus the bearer credential supplied by the caller"""
    base_url: str
    token: Optional[str] = None

    def headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

class GatewayError(Exception):
    """Failed store call; status is None for transport failures"""

    def __init__(self, message: str, status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload

def escape_filter_value(value: str) -> str:
    """Quote-safe literal for a filter expression"""
    return value.replace("\\", "\\\\").replace('"', '\\"')

def build_search_filter(schema: CollectionSchema, query: Optional[str]) -> str:
    """
    Case-insensitive contains filter over the schema's searchable attributes.

    Collections without search_fields, and blank queries, produce no filter.
    """
    text = (query or "").strip()
    if not text or not schema.search_fields:
        return ""
    literal = escape_filter_value(text)
    return " || ".join(f'{attr} ~ "{literal}"' for attr in schema.search_fields)

def error_message(payload: Any, status: int) -> str:
    """Server-supplied message, else a status-derived one"""
    if isinstance(payload, dict):
        for key in ("error", "message"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Request failed ({status})"

def option_label(record: Record, display: str) -> str:
    label = resolve_path(record, display)
    if label is None or label == "":
        return str(record.get("id", ""))
    return str(label)

class RecordGateway:
    """Thin async client over the store's admin API"""

    def __init__(
        self,
        session: Session,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = HTTP_TIMEOUT
    ):
        self.session = session
        self._client = httpx.AsyncClient(
            base_url=session.base_url,
            transport=transport,
            timeout=timeout
        )

    async def __aenter__(self) -> "RecordGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[WriteBody] = None
    ) -> Any:
        """Issue one call and return the parsed JSON body ({} when empty)"""
        kwargs: Dict[str, Any] = {"headers": self.session.headers()}
        if params:
            kwargs["params"] = {k: str(v) for k, v in params.items() if v is not None and str(v) != ""}
        if isinstance(body, FormSubmission):
            kwargs["files"] = body.to_multipart()
        elif body is not None:
            kwargs["json"] = body

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed before a response: {e}")
            raise GatewayError(f"Network error: {e}") from e

        payload: Any = None
        if response.content:
            try:
                payload = response.json()
            except ValueError:
                payload = None

        if response.is_error:
            message = error_message(payload, response.status_code)
            logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise GatewayError(message, status=response.status_code, payload=payload)

        return payload if payload is not None else {}

    @staticmethod
    def _single(payload: Any) -> Record:
        if isinstance(payload, dict) and isinstance(payload.get("item"), dict):
            return payload["item"]
        return payload if isinstance(payload, dict) else {}

    async def get_identity(self) -> AdminIdentity:
        """Identity lookup for the current credential"""
        payload = await self.request("GET", f"{ADMIN_PREFIX}/me")
        if isinstance(payload, dict):
            for key in ("user", "item", "record"):
                if isinstance(payload.get(key), dict):
                    payload = payload[key]
                    break
        return AdminIdentity.model_validate(payload if isinstance(payload, dict) else {})

    async def list_records(
        self,
        collection: str,
        page: int = 1,
        per_page: int = LIST_PAGE_SIZE,
        sort: str = "",
        filter_expr: str = "",
        expand: str = ""
    ) -> ListResult:
        """
        List records of a collection

        Args:
            collection: Collection name
            page: 1-based page number
            per_page: Page size
            sort: Sort expression, e.g. "-updated" or "order,label"
            filter_expr: Filter expression; empty means unfiltered
            expand: Comma-separated relation keys to resolve

        Returns:
            ListResult with the page's items
        """
        payload = await self.request(
            "GET",
            f"{ADMIN_PREFIX}/{collection}",
            params={"page": page, "perPage": per_page, "sort": sort, "filter": filter_expr, "expand": expand}
        )
        if not isinstance(payload, dict):
            return ListResult(page=page, per_page=per_page)
        result = ListResult.model_validate(payload)
        logger.info(f"Listed {len(result.items)} {collection} record(s)")
        return result

    async def get_record(self, collection: str, record_id: str, expand: str = "") -> Record:
        payload = await self.request(
            "GET", f"{ADMIN_PREFIX}/{collection}/{record_id}", params={"expand": expand}
        )
        return self._single(payload)

    async def create_record(self, collection: str, body: WriteBody) -> Record:
        logger.info(f"Creating {collection} record")
        payload = await self.request("POST", f"{ADMIN_PREFIX}/{collection}", body=body)
        return self._single(payload)

    async def update_record(self, collection: str, record_id: str, body: WriteBody) -> Record:
        logger.info(f"Updating {collection} record {record_id}")
        payload = await self.request("PATCH", f"{ADMIN_PREFIX}/{collection}/{record_id}", body=body)
        return self._single(payload)

    async def delete_record(self, collection: str, record_id: str) -> None:
        logger.info(f"Deleting {collection} record {record_id}")
        await self.request("DELETE", f"{ADMIN_PREFIX}/{collection}/{record_id}")

    async def fetch_relation_options(
        self,
        field: Union[RelationField, MultiRelationField]
    ) -> List[RelationOption]:
        """Up to RELATION_OPTIONS_LIMIT selectable records of the related collection"""
        result = await self.list_records(field.collection, page=1, per_page=RELATION_OPTIONS_LIMIT)
        return [
            RelationOption(id=str(record["id"]), label=option_label(record, field.display))
            for record in result.items
            if record.get("id")
        ]

    async def prefetch_relation_options(self, schema: CollectionSchema) -> Dict[str, List[RelationOption]]:
        """
        Fetch options for every relation field of a schema concurrently.

        A field whose fetch fails gets an empty option list; the other
        fields are unaffected.
        """
        fields = schema.relation_fields()
        if not fields:
            return {}
        results = await asyncio.gather(
            *(self.fetch_relation_options(f) for f in fields),
            return_exceptions=True
        )
        options: Dict[str, List[RelationOption]] = {}
        for field, result in zip(fields, results):
            if isinstance(result, GatewayError):
                logger.warning(f"Options for {schema.name}.{field.key} unavailable: {result.message}")
                options[field.key] = []
            elif isinstance(result, BaseException):
                raise result
            else:
                options[field.key] = result
        return options
